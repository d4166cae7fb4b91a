# ABOUTME: Typed block and rich-text model for Notion page content.
# ABOUTME: Parses raw API block dicts into ContentBlock variants without raising.

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class RichSpan:
    """A run of text with style flags and an optional link target."""
    text: str
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False
    href: str | None = None


Spans = tuple[RichSpan, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: Spans = ()


@dataclass(frozen=True)
class Heading:
    level: int
    spans: Spans = ()


@dataclass(frozen=True)
class BulletedItem:
    spans: Spans = ()


@dataclass(frozen=True)
class NumberedItem:
    spans: Spans = ()


@dataclass(frozen=True)
class Code:
    language: str = ""
    spans: Spans = ()


@dataclass(frozen=True)
class Quote:
    spans: Spans = ()


@dataclass(frozen=True)
class Image:
    url: str
    caption: Spans = ()


@dataclass(frozen=True)
class Divider:
    pass


@dataclass(frozen=True)
class Unknown:
    """A block type with no dedicated rendering.

    ``spans`` is None when the block carries no recognisable rich text.
    """
    block_type: str
    spans: Spans | None = field(default=None)


ContentBlock = Union[
    Paragraph, Heading, BulletedItem, NumberedItem, Code, Quote, Image, Divider, Unknown
]

HEADING_LEVELS = {"heading_1": 1, "heading_2": 2, "heading_3": 3}


def parse_rich_text(rich_text: Any) -> Spans:
    """Convert a Notion rich_text array into RichSpans.

    Items that are not mappings are skipped.
    """
    if not isinstance(rich_text, list):
        return ()

    spans = []
    for item in rich_text:
        if not isinstance(item, dict):
            continue
        annotations = item.get("annotations") or {}
        spans.append(RichSpan(
            text=item.get("plain_text") or "",
            bold=bool(annotations.get("bold")),
            italic=bool(annotations.get("italic")),
            strikethrough=bool(annotations.get("strikethrough")),
            code=bool(annotations.get("code")),
            href=item.get("href") or None,
        ))
    return tuple(spans)


def _image_url(data: dict) -> str:
    if data.get("type") == "external":
        return (data.get("external") or {}).get("url", "")
    return (data.get("file") or {}).get("url", "")


def parse_block(block: Any) -> ContentBlock:
    """Convert one raw Notion block dict into a ContentBlock.

    Never raises: anything unrecognised or structurally broken becomes
    an Unknown block.
    """
    if not isinstance(block, dict):
        return Unknown(block_type="")

    block_type = block.get("type")
    if not isinstance(block_type, str):
        return Unknown(block_type="")

    data = block.get(block_type)
    if not isinstance(data, dict):
        if block_type == "divider":
            return Divider()
        return Unknown(block_type=block_type)

    spans = parse_rich_text(data.get("rich_text"))

    if block_type == "paragraph":
        return Paragraph(spans)
    if block_type in HEADING_LEVELS:
        return Heading(HEADING_LEVELS[block_type], spans)
    if block_type == "bulleted_list_item":
        return BulletedItem(spans)
    if block_type == "numbered_list_item":
        return NumberedItem(spans)
    if block_type == "code":
        return Code(language=data.get("language") or "", spans=spans)
    if block_type == "quote":
        return Quote(spans)
    if block_type == "image":
        return Image(url=_image_url(data), caption=parse_rich_text(data.get("caption")))
    if block_type == "divider":
        return Divider()

    if isinstance(data.get("rich_text"), list):
        return Unknown(block_type=block_type, spans=spans)
    return Unknown(block_type=block_type)
