"""Compilation of compact filter expressions into database query filters.

Expressions take the form ``PropertyName[:Type]=Value``, for example
``Status:select=Done`` or ``Name=Groceries``. The type defaults to
``rich_text`` when omitted.
"""

import math
import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.notion.exceptions import InvalidFilterSyntaxError, InvalidFilterValueError

_ESCAPE = "\\"

_TRUE_VALUES = frozenset({"true", "yes", "1"})
_FALSE_VALUES = frozenset({"false", "no", "0"})

# ASCII decimal numbers with an optional fraction and exponent
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class FilterValueType(StrEnum):
    """Property types supported in filter expressions."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    SELECT = "select"
    CHECKBOX = "checkbox"
    NUMBER = "number"


class SortDirection(StrEnum):
    """Sort directions accepted by the query endpoint."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


class QueryFilter(BaseModel):
    """A single property condition for a database query."""

    model_config = ConfigDict(frozen=True)

    property: str = Field(..., min_length=1, description="Property name")
    value_type: FilterValueType = Field(
        default=FilterValueType.RICH_TEXT,
        description="Property type the condition applies to",
    )
    value: str = Field(..., description="Raw value to compare against")


class SortSpec(BaseModel):
    """Sort order on a single property."""

    model_config = ConfigDict(frozen=True)

    property: str = Field(..., min_length=1, description="Property name")
    direction: SortDirection = Field(default=SortDirection.DESCENDING)


def _split_unescaped(text: str, separator: str) -> tuple[str, str | None]:
    """Split on the first unescaped separator, unescaping the head.

    :returns: The unescaped head and the raw remainder, or None if the
        separator does not occur.
    """
    head: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == _ESCAPE and index + 1 < len(text):
            head.append(text[index + 1])
            index += 2
            continue
        if char == separator:
            return "".join(head), text[index + 1 :]
        head.append(char)
        index += 1
    return "".join(head), None


def parse_filter(expression: str) -> QueryFilter:
    """Parse a filter expression.

    :param expression: Expression such as ``Status:select=Done``.
    :returns: Parsed filter.
    :raises InvalidFilterSyntaxError: If there is no ``=``, the property name
        is empty, or the type tag is not supported.
    """
    name_segment, value = _split_name_segment(expression)
    if value is None:
        raise InvalidFilterSyntaxError(
            f"Invalid filter '{expression}': expected PropertyName[:Type]=Value"
        )

    name, type_tag = _split_unescaped(name_segment, ":")
    name = name.strip()
    if not name:
        raise InvalidFilterSyntaxError(f"Invalid filter '{expression}': property name is empty")

    value_type = FilterValueType.RICH_TEXT
    if type_tag is not None:
        try:
            value_type = FilterValueType(type_tag.strip().lower())
        except ValueError as e:
            supported = ", ".join(member.value for member in FilterValueType)
            raise InvalidFilterSyntaxError(
                f"Invalid filter type '{type_tag.strip()}': expected one of {supported}"
            ) from e

    return QueryFilter(property=name, value_type=value_type, value=value.strip())


def _split_name_segment(expression: str) -> tuple[str, str | None]:
    """Split an expression at the first unescaped ``=``.

    The name segment keeps its escapes so that ``\\:`` survives until the
    type tag is split off.
    """
    index = 0
    while index < len(expression):
        char = expression[index]
        if char == _ESCAPE:
            index += 2
            continue
        if char == "=":
            return expression[:index], expression[index + 1 :]
        index += 1
    return expression, None


def compile_filter(query_filter: QueryFilter) -> dict[str, Any]:
    """Build the Notion API filter object for a parsed filter.

    :param query_filter: Parsed filter.
    :returns: Filter object for the query endpoint.
    :raises InvalidFilterValueError: If a checkbox or number value cannot be parsed.
    """
    value_type = query_filter.value_type
    condition: Any

    match value_type:
        case FilterValueType.CHECKBOX:
            condition = _parse_checkbox(query_filter.value)
        case FilterValueType.NUMBER:
            condition = _parse_number(query_filter.value)
        case _:
            condition = query_filter.value

    return {"property": query_filter.property, value_type.value: {"equals": condition}}


def build_filter(expression: str) -> dict[str, Any]:
    """Parse and compile a filter expression in one step."""
    return compile_filter(parse_filter(expression))


def _parse_checkbox(value: str) -> bool:
    """Parse a checkbox filter value."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise InvalidFilterValueError(f"Invalid checkbox value '{value}': expected true or false")


def _parse_number(value: str) -> int | float:
    """Parse a number filter value, keeping integers as integers."""
    stripped = value.strip()
    if _INTEGER_PATTERN.fullmatch(stripped):
        return int(stripped)
    if not _NUMBER_PATTERN.fullmatch(stripped):
        raise InvalidFilterValueError(f"Invalid number value '{value}'")

    number = float(stripped)
    if not math.isfinite(number):
        raise InvalidFilterValueError(f"Invalid number value '{value}': must be finite")
    return number


def parse_direction(direction: str) -> SortDirection:
    """Parse a sort direction such as ``asc`` or ``descending``.

    :raises ValueError: If the direction is not recognised.
    """
    match direction.strip().lower():
        case "asc" | "ascending":
            return SortDirection.ASCENDING
        case "desc" | "descending":
            return SortDirection.DESCENDING
        case _:
            raise ValueError(f"Invalid sort direction '{direction}': expected asc or desc")


def compile_sorts(sorts: list[SortSpec]) -> list[dict[str, Any]]:
    """Build the Notion API sorts array."""
    return [{"property": sort.property, "direction": sort.direction.value} for sort in sorts]
