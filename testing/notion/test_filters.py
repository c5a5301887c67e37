"""Tests for the Notion filter expression compiler."""

import unittest

from src.notion.exceptions import InvalidFilterSyntaxError, InvalidFilterValueError
from src.notion.filters import (
    FilterValueType,
    QueryFilter,
    SortDirection,
    SortSpec,
    build_filter,
    compile_filter,
    compile_sorts,
    parse_direction,
    parse_filter,
)


class TestParseFilter(unittest.TestCase):
    """Tests for parse_filter function."""

    def test_every_supported_type(self) -> None:
        """Each type tag should produce a filter of that type."""
        for value_type in FilterValueType:
            with self.subTest(value_type=value_type):
                result = parse_filter(f"Prop:{value_type.value}=1")
                self.assertEqual(result.value_type, value_type)
                self.assertEqual(result.property, "Prop")

    def test_type_defaults_to_rich_text(self) -> None:
        """Omitting the type should default to rich_text."""
        result = parse_filter("Notes=hello")

        self.assertEqual(result, QueryFilter(property="Notes", value="hello"))
        self.assertEqual(result.value_type, FilterValueType.RICH_TEXT)

    def test_type_is_case_insensitive(self) -> None:
        """Type tags should match regardless of case."""
        self.assertEqual(parse_filter("Status:SELECT=Done").value_type, FilterValueType.SELECT)

    def test_value_keeps_later_equals_signs(self) -> None:
        """Only the first = should split name and value."""
        self.assertEqual(parse_filter("Formula=a=b").value, "a=b")

    def test_whitespace_is_trimmed(self) -> None:
        """Whitespace around name, type and value should be ignored."""
        result = parse_filter(" Status : select = Done ")

        self.assertEqual(result.property, "Status")
        self.assertEqual(result.value_type, FilterValueType.SELECT)
        self.assertEqual(result.value, "Done")

    def test_escaped_equals_in_name(self) -> None:
        """An escaped = should be part of the property name."""
        result = parse_filter(r"a\=b:select=c")

        self.assertEqual(result.property, "a=b")
        self.assertEqual(result.value_type, FilterValueType.SELECT)
        self.assertEqual(result.value, "c")

    def test_escaped_colon_in_name(self) -> None:
        """An escaped colon should not start a type tag."""
        result = parse_filter(r"Time\: Start=today")

        self.assertEqual(result.property, "Time: Start")
        self.assertEqual(result.value_type, FilterValueType.RICH_TEXT)

    def test_empty_value_is_allowed(self) -> None:
        """An empty value should parse."""
        self.assertEqual(parse_filter("Notes=").value, "")

    def test_missing_equals_raises(self) -> None:
        """Expressions without = should raise InvalidFilterSyntaxError."""
        for expression in ("Status", "Status:select", "", r"Status\=Done"):
            with self.subTest(expression=expression), self.assertRaises(InvalidFilterSyntaxError):
                parse_filter(expression)

    def test_unknown_type_raises(self) -> None:
        """Unsupported type tags should raise InvalidFilterSyntaxError."""
        with self.assertRaises(InvalidFilterSyntaxError) as context:
            parse_filter("Due:date=2025-01-01")

        self.assertIn("date", str(context.exception))

    def test_empty_name_raises(self) -> None:
        """An empty property name should raise InvalidFilterSyntaxError."""
        with self.assertRaises(InvalidFilterSyntaxError):
            parse_filter(":select=Done")


class TestCompileFilter(unittest.TestCase):
    """Tests for compile_filter function."""

    def test_equality_types(self) -> None:
        """title, rich_text and select should compile to equals conditions."""
        for value_type in ("title", "rich_text", "select"):
            with self.subTest(value_type=value_type):
                self.assertEqual(
                    build_filter(f"Name:{value_type}=Groceries"),
                    {"property": "Name", value_type: {"equals": "Groceries"}},
                )

    def test_checkbox_values(self) -> None:
        """Checkbox values should parse to booleans."""
        cases = {"true": True, "TRUE": True, "yes": True, "1": True, "false": False, "No": False}
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(
                    build_filter(f"Done:checkbox={raw}"),
                    {"property": "Done", "checkbox": {"equals": expected}},
                )

    def test_invalid_checkbox_raises(self) -> None:
        """Unparseable checkbox values should raise InvalidFilterValueError."""
        with self.assertRaises(InvalidFilterValueError):
            build_filter("Done:checkbox=maybe")

    def test_number_values(self) -> None:
        """Integers should stay integers and decimals become floats."""
        self.assertEqual(build_filter("Count:number=5")["number"]["equals"], 5)
        self.assertIsInstance(build_filter("Count:number=5")["number"]["equals"], int)
        self.assertEqual(build_filter("Score:number=-2.5")["number"]["equals"], -2.5)
        self.assertEqual(build_filter("Score:number=+.5")["number"]["equals"], 0.5)
        self.assertEqual(build_filter("Score:number=2e3")["number"]["equals"], 2000.0)

    def test_invalid_number_raises(self) -> None:
        """Unparseable or non-finite numbers should raise InvalidFilterValueError."""
        for raw in ("abc", "", "nan", "inf", "1e400", "1_000", "\u0661\u0662", "1.2.3"):
            with self.subTest(raw=raw), self.assertRaises(InvalidFilterValueError):
                compile_filter(
                    QueryFilter(property="Count", value_type=FilterValueType.NUMBER, value=raw)
                )


class TestSorts(unittest.TestCase):
    """Tests for sort helpers."""

    def test_parse_direction(self) -> None:
        """Short and long direction names should be accepted."""
        self.assertEqual(parse_direction("asc"), SortDirection.ASCENDING)
        self.assertEqual(parse_direction("Ascending"), SortDirection.ASCENDING)
        self.assertEqual(parse_direction("desc"), SortDirection.DESCENDING)

    def test_parse_direction_invalid(self) -> None:
        """Unknown directions should raise ValueError."""
        with self.assertRaises(ValueError):
            parse_direction("sideways")

    def test_compile_sorts(self) -> None:
        """Sort specs should compile to the API sorts array."""
        sorts = [
            SortSpec(property="Due", direction=SortDirection.ASCENDING),
            SortSpec(property="Name"),
        ]

        self.assertEqual(
            compile_sorts(sorts),
            [
                {"property": "Due", "direction": "ascending"},
                {"property": "Name", "direction": "descending"},
            ],
        )


if __name__ == "__main__":
    unittest.main()
