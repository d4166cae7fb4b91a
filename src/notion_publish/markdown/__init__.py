# ABOUTME: Markdown conversion package.
# ABOUTME: Exports block parsing, rendering and document serialization.

from .blocks import ContentBlock, RichSpan, parse_block, parse_rich_text
from .converter import render_block, render_blocks, render_rich_text
from .document import derive_filename, parse_document, summarize, to_document

__all__ = [
    "ContentBlock",
    "RichSpan",
    "parse_block",
    "parse_rich_text",
    "render_block",
    "render_blocks",
    "render_rich_text",
    "derive_filename",
    "parse_document",
    "summarize",
    "to_document",
]
