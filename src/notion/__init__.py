"""Notion API integration module for searching, reading and editing pages."""

from src.notion.client import NotionClient
from src.notion.exceptions import NotionClientError, PartialMoveError
from src.notion.filters import QueryFilter, SortDirection, SortSpec
from src.notion.identifiers import normalize_id
from src.notion.models import MoveResult, NotionPage, ObjectKind, PageSummary

__all__ = [
    "MoveResult",
    "NotionClient",
    "NotionClientError",
    "NotionPage",
    "ObjectKind",
    "PageSummary",
    "PartialMoveError",
    "QueryFilter",
    "SortDirection",
    "SortSpec",
    "normalize_id",
]
