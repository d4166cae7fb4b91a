# ABOUTME: Writes a batch of files to the branch as one commit.
# ABOUTME: Uses the low-level tree/commit/ref API so the batch lands atomically.

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from .client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputFile:
    """A rendered document ready to be written to the repository."""
    path: str
    content: str
    message: str


def batch_commit_message(count: int, now: datetime) -> str:
    return f"Update {count} files from Notion - {now.isoformat()}"


def commit_files(
    client: GitHubClient,
    files: Sequence[OutputFile],
    now: datetime | None = None,
) -> str:
    """Commit all files to the configured branch in a single commit.

    The branch ref is only moved by the final step, so a failure at any
    earlier step leaves the branch exactly as it was. The ref is read
    once and updated without force: if another writer moves the branch
    in between, the update is rejected rather than merged.

    Args:
        client: GitHub client bound to the target repository and branch.
        files: Files to write; later entries win on duplicate paths.
        now: Timestamp for the commit message (defaults to current UTC time).

    Returns:
        SHA of the new commit.

    Raises:
        ValueError: If ``files`` is empty.
        RepositoryError: If any API call fails.
    """
    if not files:
        raise ValueError("No files to commit")
    if now is None:
        now = datetime.now(timezone.utc)

    base_commit = client.get_ref()
    base_tree = client.get_commit(base_commit)["tree"]["sha"]
    logger.debug(f"Branch {client.branch} is at {base_commit} (tree {base_tree})")

    tree = client.create_tree([(f.path, f.content) for f in files], base_tree)
    commit = client.create_commit(
        batch_commit_message(len(files), now),
        tree,
        [base_commit],
    )
    client.update_ref(commit)

    logger.info(f"Committed {len(files)} files to {client.owner}/{client.repo}@{client.branch} ({commit[:7]})")
    return commit
