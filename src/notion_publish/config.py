# ABOUTME: Configuration loading and validation for notion-publish.
# ABOUTME: Builds PublishConfig from a YAML file or from environment variables.

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os
import yaml

from .errors import ConfigurationError


@dataclass
class PublishConfig:
    """Settings for one publishing pipeline: source database, target repository, output layout."""
    notion_token: str
    notion_database_id: str
    github_token: str
    github_owner: str
    github_repo: str
    github_branch: str = "main"
    output_path: str = "content/posts"
    file_extension: str = ".mdx"
    webhook_secret: str | None = None
    schedule: str | None = None

    def validate(self) -> list[str]:
        """Return every configuration problem found (empty when valid)."""
        errors = []
        if not self.notion_token:
            errors.append("Notion API key is required")
        if not self.notion_database_id:
            errors.append("Notion database ID is required")
        if not self.github_token:
            errors.append("GitHub token is required")
        if not self.github_owner:
            errors.append("GitHub repository owner is required")
        if not self.github_repo:
            errors.append("GitHub repository name is required")
        if not self.github_branch:
            errors.append("GitHub branch is required")
        if not self.output_path:
            errors.append("Output path is required")
        if self.file_extension and not self.file_extension.startswith("."):
            errors.append(f"File extension must start with '.', got '{self.file_extension}'")
        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigurationError listing all problems, if any."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)

    def file_path_for(self, slug: str) -> str:
        """Repository path for a document slug."""
        return f"{self.output_path.strip('/')}/{slug}{self.file_extension}"


def _env_value(environ: Mapping[str, str], name: str | None) -> str:
    if not name:
        return ""
    return environ.get(name, "")


def load_config(path: Path, environ: Mapping[str, str] | None = None) -> PublishConfig:
    """Load configuration from a YAML file.

    Secrets are not stored in the file itself; the ``token_env`` and
    ``secret_env`` keys name the environment variables holding them.

    Raises:
        ConfigurationError: If the file is missing, unreadable or incomplete.
    """
    if environ is None:
        environ = os.environ

    if not path.exists():
        raise ConfigurationError([f"Config file not found: {path}"])

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError([f"Invalid YAML in config file: {e}"])

    if not isinstance(raw, dict):
        raise ConfigurationError(["Config file must contain a YAML mapping"])

    notion = raw.get("notion") or {}
    github = raw.get("github") or {}
    output = raw.get("output") or {}
    webhook = raw.get("webhook") or {}

    for name, section in (("notion", notion), ("github", github), ("output", output), ("webhook", webhook)):
        if not isinstance(section, dict):
            raise ConfigurationError([f"'{name}' section must be a mapping"])

    config = PublishConfig(
        notion_token=_env_value(environ, notion.get("token_env", "NOTION_API_KEY")),
        notion_database_id=str(notion.get("database_id", "")),
        github_token=_env_value(environ, github.get("token_env", "GITHUB_TOKEN")),
        github_owner=str(github.get("owner", "")),
        github_repo=str(github.get("repo", "")),
        github_branch=str(github.get("branch", "main")),
        output_path=str(output.get("path", "content/posts")),
        file_extension=str(output.get("extension", ".mdx")),
        webhook_secret=_env_value(environ, webhook.get("secret_env")) or None,
        schedule=raw.get("schedule"),
    )
    config.ensure_valid()
    return config


def config_from_env(environ: Mapping[str, str] | None = None) -> PublishConfig:
    """Build configuration from environment variables.

    Raises:
        ConfigurationError: Listing every missing required variable.
    """
    if environ is None:
        environ = os.environ

    config = PublishConfig(
        notion_token=environ.get("NOTION_API_KEY", ""),
        notion_database_id=environ.get("NOTION_DATABASE_ID", ""),
        github_token=environ.get("GITHUB_TOKEN", ""),
        github_owner=environ.get("GITHUB_REPO_OWNER", ""),
        github_repo=environ.get("GITHUB_REPO_NAME", ""),
        github_branch=environ.get("GITHUB_BRANCH") or "main",
        output_path=environ.get("OUTPUT_PATH") or "content/posts",
        file_extension=environ.get("FILE_EXTENSION") or ".mdx",
        webhook_secret=environ.get("WEBHOOK_SECRET") or None,
        schedule=environ.get("SCHEDULE") or None,
    )
    config.ensure_valid()
    return config
