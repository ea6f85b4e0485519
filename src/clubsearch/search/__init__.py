"""Multi-collection search: fetching, matching, aggregation and ranking."""

from clubsearch.search.aggregator import ResultAggregator
from clubsearch.search.cache import TTLCache
from clubsearch.search.cancellation import CancellationToken, OperationCancelled
from clubsearch.search.fetcher import CollectionFetcher
from clubsearch.search.schemas import SearchResponse, SearchResult, SearchResultType
from clubsearch.search.service import SearchService, SearchValidationError

__all__ = [
    "CancellationToken",
    "CollectionFetcher",
    "OperationCancelled",
    "ResultAggregator",
    "SearchResponse",
    "SearchResult",
    "SearchResultType",
    "SearchService",
    "SearchValidationError",
    "TTLCache",
]
