"""Fan-out of a query across the per-type matchers."""

import asyncio

import structlog

from clubsearch.search.cancellation import CancellationToken
from clubsearch.search.fetcher import CollectionFetcher
from clubsearch.search.matchers import MATCHERS, TypeMatcher
from clubsearch.search.schemas import SearchResult, SearchResultType

logger = structlog.get_logger()


class ResultAggregator:
    """Runs the matchers selected by a type filter and concatenates their output.

    Collections are fetched concurrently, but results are always
    concatenated in matcher order (articles, people, teams). Identical
    ids across types are kept; ``type`` tells them apart.
    """

    def __init__(
        self,
        fetcher: CollectionFetcher,
        matchers: tuple[TypeMatcher, ...] = MATCHERS,
    ) -> None:
        self._fetcher = fetcher
        self._matchers = matchers

    def select(self, type_filter: SearchResultType | None) -> tuple[TypeMatcher, ...]:
        """Matchers implied by ``type_filter``; None selects all."""
        if type_filter is None:
            return self._matchers
        return tuple(m for m in self._matchers if m.type == type_filter)

    async def aggregate(
        self,
        query: str,
        type_filter: SearchResultType | None,
        token: CancellationToken,
    ) -> list[SearchResult]:
        """Fetch the selected collections and collect every match.

        Args:
            query: Normalized query.
            type_filter: Content type to restrict to, or None for all.
            token: Cancellation token for this request.

        Returns:
            Unranked results grouped by type in matcher order.

        Raises:
            UpstreamFetchError: If any selected collection fails. The
                remaining fetches are cancelled and nothing is returned.
        """
        selected = self.select(type_filter)
        tasks = [
            asyncio.ensure_future(self._fetcher.fetch_all(m.collection, token))
            for m in selected
        ]
        try:
            collections = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        results: list[SearchResult] = []
        for matcher, collection in zip(selected, collections):
            matched = [
                matcher.project(item)
                for item in collection
                if matcher.matches(item, query)
            ]
            logger.debug(
                "type_matched",
                type=matcher.type.value,
                scanned=len(collection),
                matched=len(matched),
            )
            results.extend(matched)
        return results
