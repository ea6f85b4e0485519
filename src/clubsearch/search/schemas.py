"""Pydantic schemas for search API responses."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SearchResultType(str, Enum):
    """Content type discriminator for search results."""

    ARTICLE = "article"
    PERSON = "person"
    TEAM = "team"

    @classmethod
    def parse(cls, raw: str) -> "SearchResultType | None":
        """Case-insensitive lookup.

        Args:
            raw: Type name as received from a query string.

        Returns:
            Matching member, or None if ``raw`` names no type.
        """
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class SearchResult(BaseModel):
    """Single matching document projected into a uniform shape.

    Attributes:
        id: Opaque upstream identifier.
        type: Content type the document came from.
        title: Display title.
        description: Plain-text excerpt, at most 150 characters.
        url: Site-relative path of the document's page.
        image_url: Image URL, serialized as ``imageUrl``.
        tags: Tag names, articles only.
        date: ISO-8601 publish date, articles only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: SearchResultType
    title: str
    description: str | None = Field(default=None, max_length=150)
    url: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    tags: list[str] | None = None
    date: str | None = None


class SearchResponse(BaseModel):
    """Ranked search response envelope.

    Attributes:
        query: Normalized query string.
        count: Number of results.
        results: Ranked results.
    """

    query: str
    count: int
    results: list[SearchResult]

    @model_validator(mode="after")
    def count_matches_results(self) -> "SearchResponse":
        if self.count != len(self.results):
            raise ValueError("count must equal the number of results")
        return self

    @classmethod
    def from_results(
        cls, query: str, results: list[SearchResult]
    ) -> "SearchResponse":
        return cls(query=query, count=len(results), results=results)


class ErrorResponse(BaseModel):
    """Error body returned for 400 and 500 responses."""

    error: str
