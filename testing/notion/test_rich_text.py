"""Tests for the Notion rich text module."""

import unittest

from src.notion.rich_text import (
    MAX_TEXT_LENGTH,
    Annotation,
    RichTextSpan,
    decode_rich_text,
    decode_rich_text_list,
    encode_rich_text,
    encode_rich_text_list,
    plain_text,
    span,
)


class TestDecodeRichText(unittest.TestCase):
    """Tests for decode_rich_text function."""

    def test_response_object(self) -> None:
        """A response object should decode text, annotations and link."""
        item = {
            "type": "text",
            "text": {"content": "docs", "link": {"url": "https://example.com"}},
            "annotations": {
                "bold": True,
                "italic": False,
                "strikethrough": False,
                "underline": True,
                "code": True,
                "color": "default",
            },
            "plain_text": "docs",
            "href": "https://example.com",
        }

        result = decode_rich_text(item)

        self.assertEqual(result.text, "docs")
        self.assertEqual(result.annotations, frozenset({Annotation.BOLD, Annotation.CODE}))
        self.assertEqual(result.link, "https://example.com")

    def test_falls_back_to_text_content(self) -> None:
        """Objects without plain_text should use text.content."""
        result = decode_rich_text({"type": "text", "text": {"content": "hello"}})

        self.assertEqual(result, RichTextSpan(text="hello"))

    def test_null_fields_decode_to_empty_span(self) -> None:
        """Null text, annotations and href should not raise."""
        result = decode_rich_text({"text": None, "annotations": None, "href": 5})

        self.assertEqual(result, RichTextSpan(text=""))

    def test_mention_uses_href(self) -> None:
        """Mentions carry their link only in href."""
        item = {"type": "mention", "plain_text": "Page", "href": "https://notion.so/page"}

        result = decode_rich_text(item)

        self.assertEqual(result.text, "Page")
        self.assertEqual(result.link, "https://notion.so/page")

    def test_list_skips_non_objects(self) -> None:
        """Non-dict entries and non-list input should be ignored."""
        self.assertEqual(decode_rich_text_list(None), [])
        self.assertEqual(
            decode_rich_text_list([{"plain_text": "a"}, "junk", None]),
            [RichTextSpan(text="a")],
        )


class TestEncodeRichText(unittest.TestCase):
    """Tests for encode_rich_text function."""

    def test_plain_span(self) -> None:
        """A plain span should encode without annotations or link."""
        self.assertEqual(
            encode_rich_text(span("hello")),
            [{"type": "text", "text": {"content": "hello"}}],
        )

    def test_annotated_linked_span(self) -> None:
        """Annotations should be encoded as all four flags."""
        result = encode_rich_text(span("x", Annotation.ITALIC, link="https://example.com"))

        self.assertEqual(result[0]["text"]["link"], {"url": "https://example.com"})
        self.assertEqual(
            result[0]["annotations"],
            {"bold": False, "italic": True, "code": False, "strikethrough": False},
        )

    def test_long_text_is_split(self) -> None:
        """Text over the API limit should be split into several objects."""
        text = "a" * (MAX_TEXT_LENGTH * 2 + 5)

        result = encode_rich_text(span(text, Annotation.BOLD))

        self.assertEqual(len(result), 3)
        self.assertEqual([len(item["text"]["content"]) for item in result], [2000, 2000, 5])
        self.assertTrue(all(item["annotations"]["bold"] for item in result))

    def test_encoded_list_decodes_to_same_spans(self) -> None:
        """Encoded spans should decode back to equal spans."""
        spans = [
            span("Read "),
            span("the docs", Annotation.BOLD, Annotation.STRIKETHROUGH, link="https://x.y"),
        ]

        decoded = decode_rich_text_list(encode_rich_text_list(spans))

        self.assertEqual(decoded, spans)
        self.assertEqual(plain_text(decoded), "Read the docs")


if __name__ == "__main__":
    unittest.main()
