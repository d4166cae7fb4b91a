# ABOUTME: Renders Notion content blocks as Markdown fragments.
# ABOUTME: Pure functions; every block variant renders to some text.

from typing import Iterable

from .blocks import (
    BulletedItem,
    Code,
    ContentBlock,
    Divider,
    Heading,
    Image,
    NumberedItem,
    Paragraph,
    Quote,
    RichSpan,
    Unknown,
    parse_block,
)

BLOCK_SEPARATOR = "\n\n"


def render_span(span: RichSpan) -> str:
    """Render one rich-text span.

    Style markers are applied one after another (bold, italic,
    strikethrough, code), each wrapping the previous result, and the
    link wraps last.
    """
    text = span.text

    if span.bold:
        text = f"**{text}**"
    if span.italic:
        text = f"*{text}*"
    if span.strikethrough:
        text = f"~~{text}~~"
    if span.code:
        text = f"`{text}`"

    if span.href:
        text = f"[{text}]({span.href})"

    return text


def render_rich_text(spans: Iterable[RichSpan]) -> str:
    """Concatenate rendered spans with no separator."""
    return "".join(render_span(span) for span in spans)


def render_block(block: ContentBlock) -> str:
    """Render a single block, without the trailing block separator.

    Numbered items always use the literal marker "1."; Markdown
    renderers renumber consecutive items.
    """
    if isinstance(block, Paragraph):
        return render_rich_text(block.spans)

    if isinstance(block, Heading):
        return f"{'#' * block.level} {render_rich_text(block.spans)}"

    if isinstance(block, BulletedItem):
        return f"- {render_rich_text(block.spans)}"

    if isinstance(block, NumberedItem):
        return f"1. {render_rich_text(block.spans)}"

    if isinstance(block, Code):
        return f"```{block.language}\n{render_rich_text(block.spans)}\n```"

    if isinstance(block, Quote):
        return f"> {render_rich_text(block.spans)}"

    if isinstance(block, Image):
        return f"![{render_rich_text(block.caption)}]({block.url})"

    if isinstance(block, Divider):
        return "---"

    if isinstance(block, Unknown) and block.spans:
        return render_rich_text(block.spans)

    return ""


def render_blocks(blocks: Iterable[ContentBlock | dict]) -> str:
    """Render a sequence of blocks into a document body.

    Accepts parsed blocks or raw Notion block dicts. Each block's output
    is followed by one blank line.
    """
    result = []
    for block in blocks:
        if isinstance(block, dict):
            block = parse_block(block)
        result.append(render_block(block) + BLOCK_SEPARATOR)

    return "".join(result)
