"""Rich text spans and their conversion to and from Notion API objects."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Maximum length of a single text object accepted by the Notion API
MAX_TEXT_LENGTH = 2000


class Annotation(StrEnum):
    """Supported text annotations."""

    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    STRIKETHROUGH = "strikethrough"


class RichTextSpan(BaseModel):
    """A run of text with formatting annotations and an optional link."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Text content")
    annotations: frozenset[Annotation] = Field(
        default_factory=frozenset,
        description="Annotations applied to the whole span",
    )
    link: str | None = Field(None, description="Link URL")


def span(text: str, *annotations: Annotation, link: str | None = None) -> RichTextSpan:
    """Build a span from text and annotations."""
    return RichTextSpan(text=text, annotations=frozenset(annotations), link=link)


def decode_rich_text(item: dict[str, Any]) -> RichTextSpan:
    """Decode a single rich text object from an API response.

    Reads ``plain_text`` where present, falling back to ``text.content`` so
    that request payloads decode the same way as responses.

    :param item: Rich text object.
    :returns: Decoded span.
    """
    text_obj = item.get("text")
    if not isinstance(text_obj, dict):
        text_obj = {}
    text = item.get("plain_text")
    if not isinstance(text, str):
        text = text_obj.get("content")
    if not isinstance(text, str):
        text = ""

    raw_annotations = item.get("annotations")
    if not isinstance(raw_annotations, dict):
        raw_annotations = {}
    annotations = frozenset(
        annotation for annotation in Annotation if raw_annotations.get(annotation.value) is True
    )

    link_obj = text_obj.get("link")
    link = link_obj.get("url") if isinstance(link_obj, dict) else None
    if link is None:
        link = item.get("href")
    if not isinstance(link, str):
        link = None

    return RichTextSpan(text=text, annotations=annotations, link=link)


def decode_rich_text_list(items: Any) -> list[RichTextSpan]:
    """Decode a rich text array, ignoring anything that is not an object."""
    if not isinstance(items, list):
        return []
    return [decode_rich_text(item) for item in items if isinstance(item, dict)]


def encode_rich_text(rich_text: RichTextSpan) -> list[dict[str, Any]]:
    """Encode a span as request text objects.

    Spans longer than the API limit are split into consecutive text objects
    carrying the same annotations and link.

    :param rich_text: Span to encode.
    :returns: One or more text objects.
    """
    chunks = [
        rich_text.text[start : start + MAX_TEXT_LENGTH]
        for start in range(0, len(rich_text.text), MAX_TEXT_LENGTH)
    ] or [""]

    encoded: list[dict[str, Any]] = []
    for chunk in chunks:
        text_obj: dict[str, Any] = {"content": chunk}
        if rich_text.link is not None:
            text_obj["link"] = {"url": rich_text.link}

        item: dict[str, Any] = {"type": "text", "text": text_obj}
        if rich_text.annotations:
            item["annotations"] = {
                annotation.value: annotation in rich_text.annotations for annotation in Annotation
            }
        encoded.append(item)

    return encoded


def encode_rich_text_list(spans: list[RichTextSpan]) -> list[dict[str, Any]]:
    """Encode a sequence of spans as a request ``rich_text`` array."""
    encoded: list[dict[str, Any]] = []
    for rich_text in spans:
        encoded.extend(encode_rich_text(rich_text))
    return encoded


def plain_text(spans: list[RichTextSpan]) -> str:
    """Concatenate the text of a sequence of spans."""
    return "".join(rich_text.text for rich_text in spans)
