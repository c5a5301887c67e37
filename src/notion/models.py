"""Pydantic models for Notion API data."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ObjectKind(StrEnum):
    """Kinds of object returned by search."""

    PAGE = "page"
    DATABASE = "database"


class PageSummary(BaseModel):
    """A page or database as listed by search.

    Represents the fields needed to identify and display an object.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Notion object ID")
    title: str = Field("", description="Plain text title, empty when untitled")
    kind: ObjectKind = Field(default=ObjectKind.PAGE, description="Page or database")
    url: str | None = Field(None, description="Notion URL")


class NotionPage(PageSummary):
    """A page with its state and display values of its properties.

    Returned by page reads, updates and database queries.
    """

    archived: bool = Field(default=False, description="Whether the page is archived")
    icon: str | None = Field(None, description="Emoji icon")
    properties: dict[str, str] = Field(
        default_factory=dict,
        description="Display values of non-title properties, in API order",
    )


class MoveResult(BaseModel):
    """Outcome of moving a page to a new parent."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(..., description="ID of the original page")
    created: PageSummary = Field(..., description="The copy created under the new parent")
    archived_original: bool = Field(..., description="Whether the original was archived")
    copied_blocks: int = Field(default=0, ge=0, description="Blocks copied to the new page")
    skipped_blocks: int = Field(
        default=0,
        ge=0,
        description="Unsupported blocks that could not be copied",
    )
