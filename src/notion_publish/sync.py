# ABOUTME: Orchestrates a publish run: Notion pages in, MDX files committed to GitHub.
# ABOUTME: Every run ends in a SyncResult; exceptions never escape to the caller.

import logging
from dataclasses import dataclass
from typing import Any

from .config import PublishConfig
from .errors import ConfigurationError, PublishError, RepositoryNotFoundError, SourceFetchError
from .github import GitHubClient, OutputFile, commit_files, write_file
from .markdown import derive_filename, to_document
from .notion import ContentPage, NotionClient, list_pages, page_from_row, query_rows

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a publish run, as reported to the trigger."""
    success: bool
    message: str
    files_processed: int | None = None
    errors: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON shape returned to callers; optional fields are omitted when unset."""
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.files_processed is not None:
            result["filesProcessed"] = self.files_processed
        if self.errors is not None:
            result["errors"] = self.errors
        return result


def normalize_page_id(page_id: str) -> str:
    """Notion IDs are accepted with or without dashes."""
    return page_id.replace("-", "").lower()


def _error_text(error: Exception) -> str:
    return str(error) or type(error).__name__


class Publisher:
    """Converts the configured Notion database and publishes it to GitHub."""

    def __init__(
        self,
        config: PublishConfig,
        notion: NotionClient | None = None,
        github: GitHubClient | None = None,
    ):
        self.config = config
        self.notion = notion or NotionClient(config.notion_token)
        self.github = github or GitHubClient(
            config.github_token,
            config.github_owner,
            config.github_repo,
            config.github_branch,
        )

    def validate_configuration(self) -> list[str]:
        """Every configuration problem, without touching the network."""
        return self.config.validate()

    def ensure_repository(self) -> None:
        """Raise RepositoryNotFoundError unless the target repository is reachable."""
        lookup = self.github.get_repository()
        if lookup.found:
            return
        if lookup.error is not None:
            logger.error(f"Repository validation failed: {lookup.error}")
        raise RepositoryNotFoundError(self.config.github_owner, self.config.github_repo)

    def to_output_file(self, page: ContentPage) -> OutputFile:
        path = self.config.file_path_for(derive_filename(page.title))
        return OutputFile(
            path=path,
            content=to_document(page),
            message=f"Update {page.title} from Notion",
        )

    def publish_all(self) -> SyncResult:
        """Convert every page in the database and push them as one commit."""
        try:
            self.config.ensure_valid()
            logger.info("Starting Notion to GitHub MDX conversion...")

            try:
                self.ensure_repository()
            except RepositoryNotFoundError as e:
                return SyncResult(
                    success=False,
                    message="Invalid GitHub repository configuration",
                    errors=[_error_text(e)],
                )

            errors: list[str] = []

            def record_failure(title: str, error: SourceFetchError) -> None:
                message = f'Failed to convert page "{title}": {error}'
                logger.warning(message)
                errors.append(message)

            pages = list_pages(self.notion, self.config.notion_database_id, on_error=record_failure)

            if not pages and not errors:
                return SyncResult(
                    success=False,
                    message="No pages found in the specified Notion database",
                    errors=["Database is empty or access denied"],
                )

            files = []
            for page in pages:
                try:
                    output = self.to_output_file(page)
                except Exception as e:
                    message = f'Failed to convert page "{page.title}": {_error_text(e)}'
                    logger.warning(message)
                    errors.append(message)
                    continue
                files.append(output)
                logger.info(f"Converted: {page.title} -> {output.path}")

            if not files:
                return SyncResult(
                    success=False,
                    message="No files were successfully converted",
                    errors=errors,
                )

            logger.info("Pushing files to GitHub...")
            commit_files(self.github, files)

            return SyncResult(
                success=True,
                message=f"Successfully converted and pushed {len(files)} pages to GitHub",
                files_processed=len(files),
                errors=errors or None,
            )

        except ConfigurationError as e:
            return SyncResult(success=False, message="Invalid configuration", errors=e.missing)
        except PublishError as e:
            logger.error(f"Conversion failed: {e}")
            return SyncResult(success=False, message="Conversion process failed", errors=[_error_text(e)])
        except Exception as e:
            logger.exception("Conversion failed")
            return SyncResult(success=False, message="Conversion process failed", errors=[_error_text(e)])

    def publish_page(self, page_id: str) -> SyncResult:
        """Convert one page from the database and write it as a single file."""
        try:
            self.config.ensure_valid()

            rows = query_rows(self.notion, self.config.notion_database_id)
            wanted = normalize_page_id(page_id)
            row = next((row for row in rows if normalize_page_id(row["id"]) == wanted), None)

            if row is None:
                return SyncResult(
                    success=False,
                    message="Page not found",
                    errors=[f"Page with ID {page_id} not found in database"],
                )

            # A failed block fetch aborts the run and leaves the published file as is.
            target = page_from_row(self.notion, row)
            output = self.to_output_file(target)
            write_file(self.github, output.path, output.content, output.message)

            return SyncResult(
                success=True,
                message=f'Successfully converted and pushed "{target.title}" to GitHub',
                files_processed=1,
            )

        except ConfigurationError as e:
            return SyncResult(success=False, message="Invalid configuration", errors=e.missing)
        except PublishError as e:
            logger.error(f"Single page conversion failed: {e}")
            return SyncResult(success=False, message="Single page conversion failed", errors=[_error_text(e)])
        except Exception as e:
            logger.exception("Single page conversion failed")
            return SyncResult(success=False, message="Single page conversion failed", errors=[_error_text(e)])
