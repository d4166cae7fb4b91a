# ABOUTME: Page assembly: fetches a page's properties and blocks and renders its body.
# ABOUTME: Produces immutable ContentPage values for one conversion cycle.

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from ..errors import SourceFetchError
from ..markdown import render_blocks
from .client import NOTION_ERRORS, NotionClient
from .properties import PropertyBag

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


@dataclass(frozen=True)
class ContentPage:
    """A Notion page converted to Markdown."""
    id: str
    title: str
    body: str
    last_edited_time: datetime
    url: str = ""
    properties: PropertyBag = field(default_factory=PropertyBag, compare=False)


def parse_timestamp(value: str | None) -> datetime:
    """Parse a Notion ISO 8601 timestamp, defaulting to now."""
    if not value:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable timestamp '{value}', using current time")
        return datetime.now(timezone.utc)


def get_page_title(page: dict) -> str:
    """Title of a page, or "Untitled" when it has no title property."""
    return PropertyBag.from_api(page.get("properties")).find_title() or UNTITLED


def fetch_body(client: NotionClient, page_id: str) -> str:
    """Fetch a page's top-level blocks and render them.

    Raises:
        SourceFetchError: If the block listing fails.
    """
    try:
        blocks = client.get_blocks(page_id)
    except NOTION_ERRORS as e:
        raise SourceFetchError(f"Failed to fetch blocks for page {page_id}: {e}") from e
    return render_blocks(blocks)


def _build_page(page: dict, title: str, body: str) -> ContentPage:
    return ContentPage(
        id=page["id"],
        title=title,
        body=body,
        last_edited_time=parse_timestamp(page.get("last_edited_time")),
        url=page.get("url") or "",
        properties=PropertyBag.from_api(page.get("properties")),
    )


def page_from_row(client: NotionClient, row: dict) -> ContentPage:
    """Fetch the body of a database row and convert it.

    Raises:
        SourceFetchError: If the block listing fails.
    """
    return _build_page(row, get_page_title(row), fetch_body(client, row["id"]))


def assemble_page(client: NotionClient, page_id: str) -> ContentPage:
    """Fetch and convert a single page.

    A failed page lookup gives an "Untitled" page and a failed block
    listing gives an empty body; neither raises.
    """
    try:
        page = client.get_page(page_id)
    except NOTION_ERRORS as e:
        logger.warning(f"Failed to retrieve page {page_id}: {e}")
        page = {"id": page_id}

    title = get_page_title(page)

    try:
        body = fetch_body(client, page_id)
    except SourceFetchError as e:
        logger.warning(f"{e}; using empty body for '{title}'")
        body = ""

    return _build_page({**page, "id": page_id}, title, body)


def query_rows(client: NotionClient, database_id: str) -> list[dict]:
    """Page rows of a database, most recently edited first.

    Rows without an ID or properties are dropped.

    Raises:
        SourceFetchError: If the database query fails.
    """
    try:
        rows = client.query_database(database_id)
    except NOTION_ERRORS as e:
        raise SourceFetchError(f"Failed to query database {database_id}: {e}") from e

    return [
        row for row in rows
        if isinstance(row, dict) and "id" in row and "properties" in row
    ]


def list_pages(
    client: NotionClient,
    database_id: str,
    on_error: Callable[[str, SourceFetchError], None] | None = None,
) -> list[ContentPage]:
    """Fetch and convert every page in a database, most recently edited first.

    Args:
        client: The Notion API client.
        database_id: Database to query.
        on_error: Called with the page title and error when a page's
            blocks cannot be fetched; that page is then skipped. Without
            it the page is kept with an empty body.

    Raises:
        SourceFetchError: If the database query itself fails.
    """
    rows = query_rows(client, database_id)

    pages = []
    for row in rows:
        try:
            page = page_from_row(client, row)
        except SourceFetchError as e:
            title = get_page_title(row)
            if on_error is not None:
                on_error(title, e)
                continue
            logger.warning(f"{e}; using empty body for '{title}'")
            page = _build_page(row, title, "")

        pages.append(page)

    logger.info(f"Converted {len(pages)} of {len(rows)} pages from database {database_id}")
    return pages
