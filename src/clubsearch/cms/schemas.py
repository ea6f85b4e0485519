"""Pydantic models for documents read from the content repository."""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CmsModel(BaseModel):
    """Base model for upstream documents (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class MediaRef(CmsModel):
    """Resolved media upload."""

    url: str | None = None
    alt: str | None = None


class TagRef(CmsModel):
    """Resolved tag relation."""

    name: str | None = None


def _resolved_only(value: Any) -> Any:
    """Drop relations the repository returned as bare ids.

    With a shallow population depth the repository may return a
    relation as its id instead of the related document.
    """
    if isinstance(value, dict):
        return value
    return None


class CmsDocument(CmsModel):
    """Fields shared by every collection."""

    id: str
    slug: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept numeric ids; the id is treated as opaque text."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ArticleDoc(CmsDocument):
    """News article."""

    title: str = Field(min_length=1)
    summary: str | None = None
    body: str | None = Field(default=None, description="Rich text rendered as HTML")
    tags: list[TagRef] = Field(default_factory=list)
    cover_image: MediaRef | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def keep_resolved_tags(cls, v: Any) -> Any:
        """Skip unresolved tag ids and nulls."""
        if v is None:
            return []
        if isinstance(v, list):
            return [item for item in v if isinstance(item, dict)]
        return v

    @field_validator("cover_image", mode="before")
    @classmethod
    def keep_resolved_image(cls, v: Any) -> Any:
        return _resolved_only(v)

    @property
    def tag_names(self) -> list[str]:
        """Non-empty tag names in upstream order."""
        return [tag.name for tag in self.tags if tag.name]


class PersonDoc(CmsDocument):
    """Player or staff member.

    Staff share the collection with players and are recognised only by
    the missing shirt number.
    """

    title: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    position: str | None = None
    position_short: str | None = None
    shirt_number: int | None = None
    photo: MediaRef | None = None

    @field_validator("photo", mode="before")
    @classmethod
    def keep_resolved_photo(cls, v: Any) -> Any:
        return _resolved_only(v)

    @property
    def is_staff(self) -> bool:
        return self.shirt_number is None

    @property
    def display_name(self) -> str:
        """First and last name, falling back to the document title."""
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.title or ""


class TeamDoc(CmsDocument):
    """Club team."""

    title: str = Field(min_length=1)
    image: MediaRef | None = None

    @field_validator("image", mode="before")
    @classmethod
    def keep_resolved_image(cls, v: Any) -> Any:
        return _resolved_only(v)


CollectionName = Literal["articles", "people", "teams"]

COLLECTION_MODELS: dict[CollectionName, type[CmsDocument]] = {
    "articles": ArticleDoc,
    "people": PersonDoc,
    "teams": TeamDoc,
}

DocT = TypeVar("DocT", bound=CmsDocument)


class CollectionPage(CmsModel, Generic[DocT]):
    """One page of a paginated collection listing.

    Attributes:
        docs: Documents on this page.
        has_next_page: Whether the repository reports a following page.
    """

    docs: list[DocT]
    has_next_page: bool = False
