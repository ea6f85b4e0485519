"""Relevance ordering for merged search results."""

from collections.abc import Callable

from clubsearch.search.schemas import SearchResult

RankKey = tuple[bool, bool, str]


def relevance_key(query: str) -> Callable[[SearchResult], RankKey]:
    """Build the sort key for ``query``.

    Keys compare, in order: exact title match first, then titles that
    start with the query, then titles alphabetically. All comparisons
    are case-insensitive.
    """
    needle = query.casefold()

    def key(result: SearchResult) -> RankKey:
        title = result.title.casefold()
        return (title != needle, not title.startswith(needle), title)

    return key


def rank(results: list[SearchResult], query: str) -> list[SearchResult]:
    """Return ``results`` ordered by relevance to ``query``.

    ``sorted`` is stable, so results with equal keys keep their
    aggregation order (articles, people, teams, then upstream order).
    """
    return sorted(results, key=relevance_key(query))
