"""Typed Notion blocks and their conversion to and from API objects.

Blocks returned by the API are decoded into a closed set of pydantic models.
Block types this module does not model decode to ``Unsupported`` rather
than failing, since Notion adds block types independently of this client.
The same models are encoded into the payload shape accepted by the append
children and create page endpoints.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.notion.rich_text import (
    RichTextSpan,
    decode_rich_text_list,
    encode_rich_text_list,
    plain_text,
    span,
)

# Maximum number of children accepted by a single append or create request
MAX_CHILDREN_PER_REQUEST = 100


class _BaseBlock(BaseModel):
    """Fields shared by every block variant."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(None, description="Block ID, set when decoded from the API")
    has_children: bool = Field(False, description="Whether the block has nested child blocks")


class Paragraph(_BaseBlock):
    """A paragraph of text."""

    type: Literal["paragraph"] = "paragraph"
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class Heading(_BaseBlock):
    """A heading of level 1, 2 or 3."""

    type: Literal["heading"] = "heading"
    level: int = Field(2, ge=1, le=3, description="Heading level")
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class BulletedListItem(_BaseBlock):
    """A bulleted list item."""

    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class NumberedListItem(_BaseBlock):
    """A numbered list item."""

    type: Literal["numbered_list_item"] = "numbered_list_item"
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class Code(_BaseBlock):
    """A code block with a language."""

    type: Literal["code"] = "code"
    language: str = Field("plain text", description="Notion code language name")
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class Divider(_BaseBlock):
    """A horizontal divider."""

    type: Literal["divider"] = "divider"


class Bookmark(_BaseBlock):
    """A bookmark to an external URL."""

    type: Literal["bookmark"] = "bookmark"
    url: str = Field(..., description="Bookmarked URL")
    caption: list[RichTextSpan] = Field(default_factory=list)


class ToDo(_BaseBlock):
    """A to-do item with a checked state."""

    type: Literal["to_do"] = "to_do"
    checked: bool = False
    rich_text: list[RichTextSpan] = Field(default_factory=list)


class Unsupported(_BaseBlock):
    """A block whose type is not modelled by this client."""

    type: Literal["unsupported"] = "unsupported"
    raw_type: str = Field(..., description="Block type reported by the API")


Block = Annotated[
    Paragraph
    | Heading
    | BulletedListItem
    | NumberedListItem
    | Code
    | Divider
    | Bookmark
    | ToDo
    | Unsupported,
    Field(discriminator="type"),
]

# Block types that carry only a rich_text array
_TEXT_BLOCKS: dict[str, type[Paragraph | BulletedListItem | NumberedListItem]] = {
    "paragraph": Paragraph,
    "bulleted_list_item": BulletedListItem,
    "numbered_list_item": NumberedListItem,
}

_HEADING_TYPES = {"heading_1": 1, "heading_2": 2, "heading_3": 3}


def decode_block(block: dict[str, Any]) -> Block:
    """Decode a block object from an API response.

    :param block: Raw block object.
    :returns: Typed block, or ``Unsupported`` for unknown block types.
    """
    block_type = block.get("type")
    common: dict[str, Any] = {
        "id": block.get("id"),
        "has_children": block.get("has_children") is True,
    }

    if not isinstance(block_type, str) or not block_type:
        return Unsupported(**common, raw_type=str(block_type or "unknown"))

    content = block.get(block_type)
    if not isinstance(content, dict):
        content = {}
    rich_text = decode_rich_text_list(content.get("rich_text"))

    if block_type in _TEXT_BLOCKS:
        return _TEXT_BLOCKS[block_type](**common, rich_text=rich_text)

    match block_type:
        case "heading_1" | "heading_2" | "heading_3":
            return Heading(**common, level=_HEADING_TYPES[block_type], rich_text=rich_text)
        case "code":
            return Code(
                **common,
                language=content.get("language") or "plain text",
                rich_text=rich_text,
            )
        case "divider":
            return Divider(**common)
        case "bookmark":
            return Bookmark(
                **common,
                url=content.get("url") or "",
                caption=decode_rich_text_list(content.get("caption")),
            )
        case "to_do":
            return ToDo(**common, checked=content.get("checked") is True, rich_text=rich_text)
        case _:
            return Unsupported(**common, raw_type=block_type)


def decode_blocks(blocks: list[dict[str, Any]]) -> list[Block]:
    """Decode a list of block objects."""
    return [decode_block(block) for block in blocks]


def encode_block(block: Block) -> dict[str, Any]:
    """Encode a block in the shape accepted by append and create requests.

    :param block: Block to encode.
    :returns: Block object for the ``children`` array.
    :raises ValueError: If the block is ``Unsupported``.
    """
    content: dict[str, Any]

    match block:
        case Heading():
            block_type = f"heading_{block.level}"
            content = {"rich_text": encode_rich_text_list(block.rich_text)}
        case Code():
            block_type = block.type
            content = {
                "rich_text": encode_rich_text_list(block.rich_text),
                "language": block.language,
            }
        case Divider():
            block_type = block.type
            content = {}
        case Bookmark():
            block_type = block.type
            content = {"url": block.url, "caption": encode_rich_text_list(block.caption)}
        case ToDo():
            block_type = block.type
            content = {
                "rich_text": encode_rich_text_list(block.rich_text),
                "checked": block.checked,
            }
        case Paragraph() | BulletedListItem() | NumberedListItem():
            block_type = block.type
            content = {"rich_text": encode_rich_text_list(block.rich_text)}
        case Unsupported():
            raise ValueError(f"Cannot encode unsupported block type: {block.raw_type}")

    return {"object": "block", "type": block_type, block_type: content}


def encode_blocks(blocks: list[Block]) -> list[dict[str, Any]]:
    """Encode a list of blocks."""
    return [encode_block(block) for block in blocks]


def is_supported(block: Block) -> bool:
    """Whether a block can be encoded for writing."""
    return not isinstance(block, Unsupported)


def block_text(block: Block) -> str:
    """Plain text content of a block, empty for blocks without text."""
    spans: list[RichTextSpan] = getattr(block, "rich_text", None) or getattr(block, "caption", [])
    return plain_text(spans)


# Builders used by the append operations


def paragraph(text: str) -> Paragraph:
    """Create a paragraph block from plain text."""
    return Paragraph(rich_text=[span(text)])


def heading(text: str, level: int = 2) -> Heading:
    """Create a heading block.

    :raises ValueError: If the level is not 1, 2 or 3.
    """
    if level not in (1, 2, 3):
        raise ValueError(f"Heading level must be 1, 2 or 3, got {level}")
    return Heading(level=level, rich_text=[span(text)])


def code(text: str, language: str = "plain text") -> Code:
    """Create a code block."""
    return Code(language=language, rich_text=[span(text)])


def bookmark(url: str, caption: str | None = None) -> Bookmark:
    """Create a bookmark block with an optional caption."""
    return Bookmark(url=url, caption=[span(caption)] if caption else [])


def to_do(text: str, *, checked: bool = False) -> ToDo:
    """Create a to-do block."""
    return ToDo(checked=checked, rich_text=[span(text)])


def divider() -> Divider:
    """Create a divider block."""
    return Divider()


def bulleted_list(items: list[str]) -> list[BulletedListItem]:
    """Create one bulleted list item per non-empty entry."""
    return [BulletedListItem(rich_text=[span(item.strip())]) for item in items if item.strip()]


def link_paragraph(
    link_text: str,
    url: str,
    *,
    prefix: str | None = None,
    suffix: str | None = None,
) -> Paragraph:
    """Create a paragraph containing a link with optional text around it."""
    spans: list[RichTextSpan] = []
    if prefix:
        spans.append(span(prefix))
    spans.append(span(link_text, link=url))
    if suffix:
        spans.append(span(suffix))
    return Paragraph(rich_text=spans)
