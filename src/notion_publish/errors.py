# ABOUTME: Error kinds raised by the publishing pipeline.
# ABOUTME: Library errors are translated into these at the client seams.


class PublishError(Exception):
    """Base class for all notion-publish errors."""
    pass


class ConfigurationError(PublishError):
    """Raised when required settings are missing or invalid.

    Carries every problem found, not just the first one.
    """

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__("; ".join(self.missing) or "Invalid configuration")


class SourceFetchError(PublishError):
    """Raised when a Notion lookup fails."""
    pass


class RepositoryError(PublishError):
    """Raised when a GitHub API call fails.

    Args:
        message: Human-readable description.
        status: HTTP status code, if a response was received.
        transient: Whether the failure is worth trying again later
            (connection problems, rate limiting, server errors).
    """

    def __init__(self, message: str, status: int | None = None, transient: bool = False):
        super().__init__(message)
        self.status = status
        self.transient = transient


class RepositoryNotFoundError(RepositoryError):
    """Raised when the target repository does not exist or is not accessible."""

    def __init__(self, owner: str, repo: str):
        super().__init__(f"Repository {owner}/{repo} not found or access denied", status=404)
        self.owner = owner
        self.repo = repo
