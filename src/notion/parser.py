"""Parser functions for Notion API responses.

This module handles the conversion between raw Notion API page and
database objects and the Pydantic models used by the client, and builds
the page property payloads sent on create and update.
"""

from typing import Any

from src.notion.models import NotionPage, ObjectKind, PageSummary
from src.notion.rich_text import decode_rich_text_list, plain_text


def parse_summary(item: dict[str, Any]) -> PageSummary:
    """Parse a search result into a PageSummary.

    :param item: Raw page or database object from the Notion API.
    :returns: Parsed summary.
    """
    return PageSummary(
        id=item["id"],
        title=extract_title(item),
        kind=_parse_kind(item),
        url=item.get("url"),
    )


def parse_page(page: dict[str, Any]) -> NotionPage:
    """Parse a page object into a NotionPage.

    :param page: Raw page object from the Notion API.
    :returns: Parsed page with display values of its properties.
    """
    properties: dict[str, str] = {}
    for name, prop in (page.get("properties") or {}).items():
        if not isinstance(prop, dict) or _is_title_property(prop):
            continue
        value = extract_property_value(prop)
        if value is not None:
            properties[name] = value

    return NotionPage(
        id=page["id"],
        title=extract_title(page),
        kind=_parse_kind(page),
        url=page.get("url"),
        archived=page.get("archived") is True or page.get("in_trash") is True,
        icon=_extract_icon(page),
        properties=properties,
    )


def extract_title(item: dict[str, Any]) -> str:
    """Extract the plain text title of a page or database.

    Databases carry a top-level ``title`` array; pages keep their title in
    whichever property has type ``title``.
    """
    if isinstance(item.get("title"), list):
        return _join_plain_text(item["title"])

    for prop in (item.get("properties") or {}).values():
        if isinstance(prop, dict) and _is_title_property(prop):
            return _join_plain_text(prop.get("title"))

    return ""


def extract_property_value(prop: dict[str, Any]) -> str | None:  # noqa: PLR0911
    """Extract a display value from a page property.

    :param prop: Raw property object.
    :returns: Display string, or None when the property is empty or of an
        unsupported type.
    """
    match prop.get("type"):
        case "title":
            return _join_plain_text(prop.get("title")) or None
        case "rich_text":
            return _join_plain_text(prop.get("rich_text")) or None
        case "select" | "status":
            return _extract_name(prop.get(prop["type"]))
        case "multi_select":
            names = [
                option.get("name", "")
                for option in prop.get("multi_select") or []
                if isinstance(option, dict) and option.get("name")
            ]
            return ", ".join(names) if names else None
        case "number":
            return _format_number(prop.get("number"))
        case "checkbox":
            checkbox = prop.get("checkbox")
            return None if checkbox is None else ("true" if checkbox else "false")
        case "date":
            return _extract_date(prop.get("date"))
        case "url" | "email" | "phone_number":
            return prop.get(prop["type"])
        case "people":
            return _extract_people(prop.get("people"))
        case _:
            return None


def _is_title_property(prop: dict[str, Any]) -> bool:
    return prop.get("type") == "title" or ("type" not in prop and "title" in prop)


def _parse_kind(item: dict[str, Any]) -> ObjectKind:
    if item.get("object") == ObjectKind.DATABASE:
        return ObjectKind.DATABASE
    return ObjectKind.PAGE


def _join_plain_text(items: Any) -> str:
    """Join the plain text of a rich text array."""
    return plain_text(decode_rich_text_list(items))


def _extract_name(option: Any) -> str | None:
    """Extract the name of a select or status option."""
    if not isinstance(option, dict):
        return None
    return option.get("name")


def _format_number(number: Any) -> str | None:
    """Format a number, dropping the fraction of whole floats."""
    if isinstance(number, bool) or not isinstance(number, int | float):
        return None
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def _extract_date(date_obj: Any) -> str | None:
    """Extract a date range as ``start`` or ``start -> end``."""
    if not isinstance(date_obj, dict) or date_obj.get("start") is None:
        return None
    end = date_obj.get("end")
    return f"{date_obj['start']} -> {end}" if end else date_obj["start"]


def _extract_people(people: Any) -> str | None:
    """Extract people's names as a comma-separated string."""
    if not isinstance(people, list):
        return None
    names = [person.get("name") for person in people if isinstance(person, dict)]
    names = [name for name in names if name]
    return ", ".join(names) if names else None


def _extract_icon(page: dict[str, Any]) -> str | None:
    """Extract an emoji icon."""
    icon = page.get("icon")
    if isinstance(icon, dict) and icon.get("type") == "emoji":
        return icon.get("emoji")
    return None


def build_title_property(title: str) -> dict[str, Any]:
    """Build the ``title`` property payload for a page under a page parent."""
    return {"title": {"title": [{"text": {"content": title}}]}}


def build_icon(emoji: str) -> dict[str, Any]:
    """Build an emoji icon payload."""
    return {"type": "emoji", "emoji": emoji}
