# ABOUTME: Creates or updates a single file through the contents API.
# ABOUTME: Passes the current blob SHA on updates so GitHub can reject stale writes.

import logging

from .client import GitHubClient

logger = logging.getLogger(__name__)


def file_exists(client: GitHubClient, path: str) -> bool:
    """Whether ``path`` exists on the branch.

    Raises:
        RepositoryError: For any lookup failure other than a miss.
    """
    return client.get_content(path).unwrap() is not None


def get_file_sha(client: GitHubClient, path: str) -> str | None:
    """Blob SHA of ``path`` on the branch, or None if it does not exist."""
    data = client.get_content(path).unwrap()
    if isinstance(data, dict):
        return data.get("sha")
    return None


def write_file(client: GitHubClient, path: str, content: str, message: str) -> None:
    """Create or update one file on the branch.

    Raises:
        RepositoryError: If the lookup or the write fails.
    """
    if file_exists(client, path):
        sha = get_file_sha(client, path)
        client.put_content(path, content, message, sha=sha)
        logger.info(f"Updated {path}")
    else:
        client.put_content(path, content, message)
        logger.info(f"Created {path}")
