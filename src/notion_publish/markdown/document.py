# ABOUTME: Serializes converted pages into MDX documents with YAML frontmatter.
# ABOUTME: Also derives file slugs from titles and reads frontmatter back.

import re
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from ..notion import ContentPage

SUMMARY_MAX_LENGTH = 150
NO_SUMMARY = "No summary available"
DEFAULT_SLUG = "untitled"

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\n(.*?)^---[ \t]*\n", re.DOTALL | re.MULTILINE)


def published_date(timestamp: datetime) -> date:
    """Calendar date (UTC) of a page's last-edited timestamp."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.date()


def summarize(body: str) -> str:
    """Summary from the first paragraph of a rendered body."""
    first_paragraph = body.split("\n\n")[0]
    if len(first_paragraph) > SUMMARY_MAX_LENGTH:
        return first_paragraph[:SUMMARY_MAX_LENGTH] + "..."
    return first_paragraph or NO_SUMMARY


def derive_filename(title: str) -> str:
    """Convert a page title into a file slug.

    Examples:
        "Hello, World!" -> "hello-world"
        "  Notes -- 2024 " -> "notes-2024"

    Different titles can map to the same slug; the later write wins.
    """
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug or DEFAULT_SLUG


def to_document(page: "ContentPage", extra_metadata: dict[str, Any] | None = None) -> str:
    """Render a ContentPage as an MDX document.

    Args:
        page: The converted page.
        extra_metadata: Frontmatter fields that override the defaults.

    Returns:
        YAML frontmatter, one blank line, then the page body verbatim.
    """
    metadata: dict[str, Any] = {
        "title": page.title,
        "publishedAt": published_date(page.last_edited_time),
        "summary": summarize(page.body),
    }
    if extra_metadata:
        metadata.update(extra_metadata)

    yaml_str = yaml.safe_dump(metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return f"---\n{yaml_str}---\n\n{page.body}"


def parse_document(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its frontmatter mapping and body.

    Documents without frontmatter return an empty mapping and the text
    unchanged.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    metadata = yaml.safe_load(match.group(1)) or {}
    if not isinstance(metadata, dict):
        raise ValueError("Frontmatter must be a YAML mapping")

    body = text[match.end():]
    if body.startswith("\n"):
        body = body[1:]
    return metadata, body
