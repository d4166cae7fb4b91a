# ABOUTME: Notion API integration package.
# ABOUTME: Exports the client wrapper and page assembly functions.

from .client import NotionClient
from .pages import ContentPage, assemble_page, fetch_body, list_pages, page_from_row, query_rows
from .properties import PageProperty, PropertyBag

__all__ = [
    "NotionClient",
    "ContentPage",
    "assemble_page",
    "fetch_body",
    "list_pages",
    "page_from_row",
    "query_rows",
    "PageProperty",
    "PropertyBag",
]
