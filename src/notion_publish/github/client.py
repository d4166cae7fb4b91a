# ABOUTME: Thin client for the GitHub REST API, scoped to one repository and branch.
# ABOUTME: Maps HTTP failures to RepositoryError and lookups to Lookup results.

import base64
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

import requests

from ..errors import RepositoryError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
REQUEST_TIMEOUT = 30  # seconds

FILE_MODE = "100644"


class LookupStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"


@dataclass(frozen=True)
class Lookup:
    """Outcome of a read that may legitimately miss.

    Only the two error statuses carry an exception; ``unwrap`` raises it.
    """
    status: LookupStatus
    value: Any = None
    error: RepositoryError | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def from_error(cls, error: RepositoryError) -> "Lookup":
        if error.status == 404:
            return cls(LookupStatus.NOT_FOUND)
        if error.transient:
            return cls(LookupStatus.TRANSIENT_ERROR, error=error)
        return cls(LookupStatus.PERMANENT_ERROR, error=error)

    def unwrap(self) -> Any:
        """Return the value, None for a miss, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value


def _is_transient(status: int) -> bool:
    return status == 429 or status >= 500


def _decode_text(content: str) -> str | None:
    try:
        return base64.b64decode(content).decode("utf-8")
    except ValueError:  # bad base64 or not UTF-8
        logger.debug("File content is not UTF-8 text")
        return None


class GitHubClient:
    """GitHub REST client bound to one repository and branch."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        branch: str = "main",
        session: requests.Session | None = None,
        api_url: str = GITHUB_API_URL,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self._api_url = api_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        })

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            RepositoryError: On connection failure or any non-2xx response.
        """
        url = f"{self._api_url}{path}"
        try:
            response = self._session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise RepositoryError(f"{method} {path} failed: {e}", transient=True) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("message", "") if isinstance(body, dict) else response.text
            raise RepositoryError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status=response.status_code,
                transient=_is_transient(response.status_code),
            )

        if not response.content:
            return None
        return response.json()

    def get_repository(self) -> Lookup:
        """Check that the repository exists and is readable."""
        try:
            return Lookup(LookupStatus.FOUND, self._request("GET", self.repo_path))
        except RepositoryError as e:
            return Lookup.from_error(e)

    def get_ref(self) -> str:
        """Commit SHA the branch currently points to."""
        data = self._request("GET", f"{self.repo_path}/git/ref/heads/{self.branch}")
        return data["object"]["sha"]

    def get_commit(self, sha: str) -> dict:
        return self._request("GET", f"{self.repo_path}/git/commits/{sha}")

    def create_tree(self, entries: list[tuple[str, str]], base_tree: str) -> str:
        """Create a tree of (path, content) blobs on top of ``base_tree``; returns its SHA."""
        tree = [
            {"path": path, "mode": FILE_MODE, "type": "blob", "content": content}
            for path, content in entries
        ]
        data = self._request(
            "POST",
            f"{self.repo_path}/git/trees",
            json={"tree": tree, "base_tree": base_tree},
        )
        return data["sha"]

    def create_commit(self, message: str, tree: str, parents: list[str]) -> str:
        data = self._request(
            "POST",
            f"{self.repo_path}/git/commits",
            json={"message": message, "tree": tree, "parents": parents},
        )
        return data["sha"]

    def update_ref(self, sha: str) -> None:
        """Move the branch to ``sha``; rejected unless it is a fast-forward."""
        self._request(
            "PATCH",
            f"{self.repo_path}/git/refs/heads/{self.branch}",
            json={"sha": sha, "force": False},
        )

    def get_content(self, path: str) -> Lookup:
        """Look up a file on the branch.

        A found value is the contents API object, with the decoded file
        text added under ``"text"``. ``"text"`` is None for files that are
        not UTF-8; the raw base64 stays under ``"content"``.
        """
        try:
            data = self._request(
                "GET",
                f"{self.repo_path}/contents/{quote(path)}",
                params={"ref": self.branch},
            )
        except RepositoryError as e:
            return Lookup.from_error(e)

        if isinstance(data, dict) and data.get("encoding") == "base64":
            data = {**data, "text": _decode_text(data.get("content", ""))}
        return Lookup(LookupStatus.FOUND, data)

    def put_content(self, path: str, content: str, message: str, sha: str | None = None) -> dict:
        """Create a file, or update it when ``sha`` of the current blob is given."""
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            payload["sha"] = sha
        return self._request("PUT", f"{self.repo_path}/contents/{quote(path)}", json=payload)
