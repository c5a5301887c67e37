"""Tests for the Notion blocks module."""

import unittest

from src.notion.blocks import (
    Bookmark,
    BulletedListItem,
    Code,
    Divider,
    Heading,
    NumberedListItem,
    Paragraph,
    ToDo,
    Unsupported,
    block_text,
    bookmark,
    bulleted_list,
    code,
    decode_block,
    divider,
    encode_block,
    heading,
    link_paragraph,
    paragraph,
    to_do,
)
from src.notion.rich_text import Annotation, span


class TestDecodeBlock(unittest.TestCase):
    """Tests for decode_block function."""

    def test_paragraph(self) -> None:
        """paragraph blocks should decode with their id and text."""
        block = {
            "object": "block",
            "id": "block-1",
            "type": "paragraph",
            "paragraph": {"rich_text": [{"plain_text": "Hello"}], "color": "default"},
        }

        result = decode_block(block)

        self.assertEqual(result, Paragraph(id="block-1", rich_text=[span("Hello")]))

    def test_headings(self) -> None:
        """heading_1/2/3 should decode to Heading with the matching level."""
        for level in (1, 2, 3):
            with self.subTest(level=level):
                block_type = f"heading_{level}"
                result = decode_block(
                    {"type": block_type, block_type: {"rich_text": [{"plain_text": "Title"}]}}
                )
                self.assertIsInstance(result, Heading)
                self.assertEqual(result.level, level)
                self.assertEqual(block_text(result), "Title")

    def test_list_items(self) -> None:
        """List item types should decode to their variants."""
        bulleted = decode_block(
            {"type": "bulleted_list_item", "bulleted_list_item": {"rich_text": []}}
        )
        numbered = decode_block(
            {"type": "numbered_list_item", "numbered_list_item": {"rich_text": []}}
        )

        self.assertIsInstance(bulleted, BulletedListItem)
        self.assertIsInstance(numbered, NumberedListItem)

    def test_code(self) -> None:
        """code blocks should keep their language."""
        result = decode_block(
            {
                "type": "code",
                "code": {"rich_text": [{"plain_text": "print(1)"}], "language": "python"},
            }
        )

        self.assertEqual(result, Code(language="python", rich_text=[span("print(1)")]))

    def test_to_do(self) -> None:
        """to_do blocks should keep their checked state."""
        result = decode_block(
            {"type": "to_do", "to_do": {"rich_text": [{"plain_text": "Buy"}], "checked": True}}
        )

        self.assertIsInstance(result, ToDo)
        self.assertTrue(result.checked)

    def test_bookmark(self) -> None:
        """bookmark blocks should keep their url and caption."""
        result = decode_block(
            {
                "type": "bookmark",
                "bookmark": {"url": "https://example.com", "caption": [{"plain_text": "Ex"}]},
            }
        )

        self.assertEqual(result, Bookmark(url="https://example.com", caption=[span("Ex")]))

    def test_divider(self) -> None:
        """divider blocks should decode without content."""
        self.assertEqual(decode_block({"type": "divider", "divider": {}}), Divider())

    def test_unknown_type_is_unsupported(self) -> None:
        """Unknown types should decode to Unsupported rather than failing."""
        result = decode_block({"id": "b", "type": "unknown_x", "unknown_x": {"weird": [1]}})

        self.assertEqual(result, Unsupported(id="b", raw_type="unknown_x"))

    def test_missing_type_is_unsupported(self) -> None:
        """Blocks without a type should decode to Unsupported."""
        result = decode_block({"id": "b"})

        self.assertIsInstance(result, Unsupported)
        self.assertEqual(result.raw_type, "unknown")

    def test_malformed_content_does_not_fail(self) -> None:
        """Content that is not an object should be treated as empty."""
        result = decode_block({"type": "paragraph", "paragraph": None})

        self.assertEqual(result, Paragraph())


class TestEncodeBlock(unittest.TestCase):
    """Tests for encode_block function."""

    def test_paragraph_shape(self) -> None:
        """Paragraphs should encode to the append children shape."""
        self.assertEqual(
            encode_block(paragraph("Hello")),
            {
                "object": "block",
                "type": "paragraph",
                "paragraph": {"rich_text": [{"type": "text", "text": {"content": "Hello"}}]},
            },
        )

    def test_heading_uses_level_in_type(self) -> None:
        """Headings should encode as heading_{level}."""
        result = encode_block(heading("Section", 3))

        self.assertEqual(result["type"], "heading_3")
        self.assertIn("heading_3", result)

    def test_code_carries_language(self) -> None:
        """Code blocks should include the language."""
        result = encode_block(code("print(1)", "python"))

        self.assertEqual(result["code"]["language"], "python")
        self.assertEqual(result["code"]["rich_text"][0]["text"]["content"], "print(1)")

    def test_bookmark_carries_url_and_caption(self) -> None:
        """Bookmarks should include url and caption."""
        result = encode_block(bookmark("https://example.com", "Example"))

        self.assertEqual(result["bookmark"]["url"], "https://example.com")
        self.assertEqual(result["bookmark"]["caption"][0]["text"]["content"], "Example")

    def test_bookmark_without_caption(self) -> None:
        """A bookmark without caption should send an empty caption array."""
        self.assertEqual(encode_block(bookmark("https://example.com"))["bookmark"]["caption"], [])

    def test_to_do_carries_checked(self) -> None:
        """To-dos should include the checked flag."""
        self.assertTrue(encode_block(to_do("Done", checked=True))["to_do"]["checked"])

    def test_divider_is_empty_object(self) -> None:
        """Dividers should encode with an empty object."""
        self.assertEqual(encode_block(divider())["divider"], {})

    def test_unsupported_cannot_be_encoded(self) -> None:
        """Encoding an unsupported block should raise ValueError."""
        with self.assertRaises(ValueError):
            encode_block(Unsupported(raw_type="table"))

    def test_encode_then_decode_round_trip(self) -> None:
        """Supported blocks should survive an encode/decode round trip."""
        blocks = [
            code("print(1)", "python"),
            paragraph("Plain"),
            Paragraph(rich_text=[span("bold", Annotation.BOLD), span(" link", link="https://a.b")]),
            heading("One", 1),
            BulletedListItem(rich_text=[span("item")]),
            NumberedListItem(rich_text=[span("first")]),
            bookmark("https://example.com", "Example"),
            divider(),
            to_do("Task", checked=True),
        ]
        for block in blocks:
            with self.subTest(block=block.type):
                self.assertEqual(decode_block(encode_block(block)), block)

    def test_decoded_block_re_encodes_without_id(self) -> None:
        """Blocks decoded from the API should encode without their id."""
        decoded = decode_block(
            {"id": "block-1", "type": "paragraph", "paragraph": {"rich_text": []}}
        )

        self.assertNotIn("id", encode_block(decoded))

    def test_api_block_survives_decode_encode_decode(self) -> None:
        """Text, annotations and links from an API block should survive re-encoding."""
        raw = {
            "object": "block",
            "id": "c02fc1d3-db8b-45c5-a222-27595b15aea7",
            "type": "paragraph",
            "has_children": False,
            "paragraph": {
                "color": "default",
                "rich_text": [
                    {
                        "type": "text",
                        "text": {"content": "Read ", "link": None},
                        "annotations": {
                            "bold": True,
                            "italic": False,
                            "strikethrough": False,
                            "underline": False,
                            "code": False,
                            "color": "red",
                        },
                        "plain_text": "Read ",
                        "href": None,
                    },
                    {
                        "type": "text",
                        "text": {
                            "content": "the docs",
                            "link": {"url": "https://developers.notion.com"},
                        },
                        "annotations": {
                            "bold": False,
                            "italic": True,
                            "strikethrough": False,
                            "underline": False,
                            "code": True,
                            "color": "default",
                        },
                        "plain_text": "the docs",
                        "href": "https://developers.notion.com",
                    },
                ],
            },
        }

        decoded = decode_block(raw)
        redecoded = decode_block(encode_block(decoded))

        self.assertEqual(redecoded, decoded.model_copy(update={"id": None}))
        self.assertEqual(
            redecoded.rich_text,
            [
                span("Read ", Annotation.BOLD),
                span(
                    "the docs",
                    Annotation.ITALIC,
                    Annotation.CODE,
                    link="https://developers.notion.com",
                ),
            ],
        )

    def test_has_children_is_decoded(self) -> None:
        """The has_children flag should be read from API blocks and default to False."""
        nested = decode_block(
            {
                "id": "b1",
                "type": "to_do",
                "has_children": True,
                "to_do": {"rich_text": [], "checked": False},
            }
        )

        self.assertTrue(nested.has_children)
        self.assertFalse(to_do("Task").has_children)
        self.assertNotIn("has_children", encode_block(nested))


class TestBlockBuilders(unittest.TestCase):
    """Tests for the block builder helpers."""

    def test_heading_rejects_bad_level(self) -> None:
        """Levels outside 1-3 should raise ValueError."""
        for level in (0, 4):
            with self.subTest(level=level), self.assertRaises(ValueError):
                heading("x", level)

    def test_bulleted_list_skips_empty_items(self) -> None:
        """Empty and whitespace-only items should be dropped and others stripped."""
        result = bulleted_list(["a", " ", " b ", ""])

        self.assertEqual([block_text(item) for item in result], ["a", "b"])

    def test_link_paragraph(self) -> None:
        """Link paragraphs should put the link on the middle span only."""
        result = link_paragraph("docs", "https://example.com", prefix="See ", suffix=".")

        self.assertEqual([item.text for item in result.rich_text], ["See ", "docs", "."])
        self.assertEqual(
            [item.link for item in result.rich_text], [None, "https://example.com", None]
        )

    def test_link_paragraph_without_prefix_or_suffix(self) -> None:
        """Only the link span should be present without prefix or suffix."""
        result = link_paragraph("docs", "https://example.com")

        self.assertEqual(len(result.rich_text), 1)


if __name__ == "__main__":
    unittest.main()
