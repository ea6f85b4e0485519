"""Search request pipeline: validate, aggregate, rank, respond."""

from dataclasses import dataclass

import structlog

from clubsearch.cms.errors import UpstreamFetchError
from clubsearch.search.aggregator import ResultAggregator
from clubsearch.search.cancellation import CancellationToken, OperationCancelled
from clubsearch.search.pipeline import Err, Ok, Result, pipeline
from clubsearch.search.ranking import rank
from clubsearch.search.schemas import SearchResponse, SearchResult, SearchResultType

logger = structlog.get_logger()

MIN_QUERY_LENGTH = 2

QUERY_REQUIRED = "Search query is required"
QUERY_TOO_SHORT = f"Search query must be at least {MIN_QUERY_LENGTH} characters"
INVALID_TYPE = "Invalid type"


class SearchValidationError(Exception):
    """Raised for unusable user input; the message is shown to the caller."""


@dataclass(frozen=True)
class SearchRequest:
    """Raw query string parameters."""

    query: str | None
    type: str | None = None


@dataclass(frozen=True)
class ValidatedSearch:
    """Normalized query and type filter (None means all types)."""

    query: str
    type_filter: SearchResultType | None


@dataclass(frozen=True)
class MatchedSearch:
    search: ValidatedSearch
    results: list[SearchResult]


def normalize_query(raw: str | None) -> str:
    return (raw or "").strip()


def validate_query(raw: str | None) -> Result[str]:
    """Normalize a raw query or explain why it is unusable."""
    query = normalize_query(raw)
    if not query:
        return Err(SearchValidationError(QUERY_REQUIRED))
    if len(query) < MIN_QUERY_LENGTH:
        return Err(SearchValidationError(QUERY_TOO_SHORT))
    return Ok(query)


def validate_type(raw: str | None) -> Result[SearchResultType | None]:
    """Parse an optional type filter; blank means all types."""
    if raw is None or not raw.strip():
        return Ok(None)
    parsed = SearchResultType.parse(raw)
    if parsed is None:
        return Err(SearchValidationError(INVALID_TYPE))
    return Ok(parsed)


def validate_request(
    request: SearchRequest, token: CancellationToken
) -> Result[ValidatedSearch]:
    """Validate the query before the type, so a bad query is reported first."""
    query = validate_query(request.query)
    if isinstance(query, Err):
        return query
    type_filter = validate_type(request.type)
    if isinstance(type_filter, Err):
        return type_filter
    return Ok(ValidatedSearch(query=query.value, type_filter=type_filter.value))


def rank_results(matched: MatchedSearch, token: CancellationToken) -> Result[MatchedSearch]:
    ranked = rank(matched.results, matched.search.query)
    return Ok(MatchedSearch(search=matched.search, results=ranked))


def respond(matched: MatchedSearch, token: CancellationToken) -> Result[SearchResponse]:
    return Ok(SearchResponse.from_results(matched.search.query, matched.results))


class SearchService:
    """Runs one search request through the stage pipeline."""

    def __init__(self, aggregator: ResultAggregator) -> None:
        self._aggregator = aggregator

    async def search(
        self,
        query: str | None,
        type: str | None = None,
        token: CancellationToken | None = None,
    ) -> Result[SearchResponse]:
        """Search every selected collection for ``query``.

        Args:
            query: Raw query string.
            type: Raw type filter.
            token: Cancellation token; a fresh one is used if omitted.

        Returns:
            ``Ok(SearchResponse)``, ``Err(SearchValidationError)`` for bad
            input, ``Err(UpstreamFetchError)`` when a collection could not
            be read, or ``Err(OperationCancelled)``.
        """
        return await pipeline(
            SearchRequest(query=query, type=type),
            validate_request,
            self._aggregate,
            rank_results,
            respond,
            token=token or CancellationToken(),
        )

    async def _aggregate(
        self, search: ValidatedSearch, token: CancellationToken
    ) -> Result[MatchedSearch]:
        try:
            results = await self._aggregator.aggregate(
                search.query, search.type_filter, token
            )
        except (UpstreamFetchError, OperationCancelled) as e:
            return Err(e)
        return Ok(MatchedSearch(search=search, results=results))
