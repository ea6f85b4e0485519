"""Per-type match predicates and result projections.

Each matcher receives an already-normalized query (trimmed, at least two
characters) and compares case-insensitively by plain substring.
"""

from typing import ClassVar, Protocol

from clubsearch.cms.schemas import (
    ArticleDoc,
    CmsDocument,
    CollectionName,
    MediaRef,
    PersonDoc,
    TeamDoc,
)
from clubsearch.search.schemas import SearchResult, SearchResultType
from clubsearch.search.text import html_to_plain, truncate


def _contains(haystack: str | None, needle: str) -> bool:
    if not haystack:
        return False
    return needle.casefold() in haystack.casefold()


def _image_url(media: MediaRef | None) -> str | None:
    if media is None:
        return None
    return media.url or None


class TypeMatcher(Protocol):
    """Predicate and projection for one content type."""

    type: SearchResultType
    collection: CollectionName

    def matches(self, item: CmsDocument, query: str) -> bool: ...

    def project(self, item: CmsDocument) -> SearchResult: ...


class ArticleMatcher:
    """Matches articles on title, tag names, or body text."""

    type: ClassVar[SearchResultType] = SearchResultType.ARTICLE
    collection: ClassVar[CollectionName] = "articles"

    def matches(self, item: ArticleDoc, query: str) -> bool:  # type: ignore[override]
        if _contains(item.title, query):
            return True
        if any(_contains(name, query) for name in item.tag_names):
            return True
        return bool(item.body) and _contains(html_to_plain(item.body), query)

    def project(self, item: ArticleDoc) -> SearchResult:  # type: ignore[override]
        published = item.published_at or item.created_at
        return SearchResult(
            id=item.id,
            type=self.type,
            title=item.title,
            description=self.describe(item),
            url=f"/news/{item.slug}",
            image_url=_image_url(item.cover_image),
            tags=item.tag_names,
            date=published.isoformat() if published else None,
        )

    @staticmethod
    def describe(item: ArticleDoc) -> str | None:
        """Summary if the article has one, otherwise the stripped body."""
        if item.summary and item.summary.strip():
            return truncate(item.summary.strip())
        if item.body:
            return truncate(html_to_plain(item.body)) or None
        return None


class PersonMatcher:
    """Matches players and staff on name or position.

    Staff have no shirt number and often only a short position code
    (e.g. ``T1`` for a head coach); both kinds share this code path.
    """

    type: ClassVar[SearchResultType] = SearchResultType.PERSON
    collection: ClassVar[CollectionName] = "people"

    def matches(self, item: PersonDoc, query: str) -> bool:  # type: ignore[override]
        return (
            _contains(item.display_name, query)
            or _contains(item.position, query)
            or _contains(item.position_short, query)
        )

    def project(self, item: PersonDoc) -> SearchResult:  # type: ignore[override]
        return SearchResult(
            id=item.id,
            type=self.type,
            title=item.display_name,
            description=self.describe(item),
            url=f"/players/{item.slug}",
            image_url=_image_url(item.photo),
        )

    @staticmethod
    def describe(item: PersonDoc) -> str | None:
        """Position, or the short position code for staff without one."""
        position = item.position or item.position_short
        return truncate(position) if position else None


class TeamMatcher:
    """Matches teams on title."""

    type: ClassVar[SearchResultType] = SearchResultType.TEAM
    collection: ClassVar[CollectionName] = "teams"

    def matches(self, item: TeamDoc, query: str) -> bool:  # type: ignore[override]
        return _contains(item.title, query)

    def project(self, item: TeamDoc) -> SearchResult:  # type: ignore[override]
        return SearchResult(
            id=item.id,
            type=self.type,
            title=item.title,
            url=f"/team/{item.slug}",
            image_url=_image_url(item.image),
        )


MATCHERS: tuple[TypeMatcher, ...] = (
    ArticleMatcher(),
    PersonMatcher(),
    TeamMatcher(),
)
