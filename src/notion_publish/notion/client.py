# ABOUTME: Wrapper around the official Notion Python SDK.
# ABOUTME: Exposes the three lookups the publisher needs: query, page, blocks.

import logging

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import collect_paginated_api

logger = logging.getLogger(__name__)

# Errors raised by the SDK for failed or timed-out requests. Transport
# failures (connection refused or reset) come through unwrapped from httpx.
NOTION_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.HTTPError)

NEWEST_FIRST = [{"timestamp": "last_edited_time", "direction": "descending"}]


class NotionClient:
    """Wrapper around the Notion SDK client."""

    def __init__(self, token: str, client: Client | None = None):
        self._client = client or Client(auth=token)

    def get_page(self, page_id: str) -> dict:
        """Retrieve a page by ID."""
        return self._client.pages.retrieve(page_id=page_id)

    def get_blocks(self, block_id: str) -> list[dict]:
        """Retrieve the direct child blocks of a block/page.

        Children of those blocks are not fetched.
        """
        return collect_paginated_api(
            self._client.blocks.children.list,
            block_id=block_id,
        )

    def query_database(self, database_id: str) -> list[dict]:
        """Query all rows from a database, most recently edited first."""
        rows = collect_paginated_api(
            self._client.databases.query,
            database_id=database_id,
            sorts=NEWEST_FIRST,
        )
        logger.debug(f"Database {database_id} returned {len(rows)} rows")
        return rows
