"""Client-side search request lifecycle.

The controller owns the displayed search state. It issues at most one
current request at a time: submitting again cancels the previous
request, and a request that is no longer current can never change what
is displayed, whichever order the responses arrive in. Changing the type
filter only re-filters the last unfiltered result set and rewrites the
URL; it never triggers a request.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import httpx
import structlog

from clubsearch.client.navigation import SEARCH_PATH, Navigator, build_search_url
from clubsearch.search.cancellation import CancellationToken, OperationCancelled
from clubsearch.search.schemas import SearchResponse, SearchResult, SearchResultType
from clubsearch.search.service import MIN_QUERY_LENGTH, normalize_query

logger = structlog.get_logger()

SEARCH_ERROR_MESSAGE = "Er is een fout opgetreden bij het zoeken. Probeer opnieuw."


class SearchRequestFailed(Exception):
    """Raised by a transport when the search endpoint answers with an error."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Search failed with HTTP {status}")
        self.status = status


class SearchTransport(Protocol):
    """Sends one unfiltered search request to the search endpoint."""

    def __call__(
        self, query: str, token: CancellationToken
    ) -> Awaitable[SearchResponse]: ...


class HttpSearchTransport:
    """Search transport over HTTP using an ``httpx.AsyncClient``."""

    def __init__(self, http: httpx.AsyncClient, endpoint: str = "/api/v1/search") -> None:
        self._http = http
        self._endpoint = endpoint

    async def __call__(self, query: str, token: CancellationToken) -> SearchResponse:
        token.raise_if_cancelled()
        response = await self._http.get(self._endpoint, params={"q": query})
        token.raise_if_cancelled()
        if not response.is_success:
            raise SearchRequestFailed(response.status_code)
        return SearchResponse.model_validate(response.json())


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ClientSearchState:
    """State displayed by the search page.

    Attributes:
        query: Last submitted normalized query.
        type_filter: Active type filter; None shows all types.
        results: Last unfiltered result set.
        total_count: Result count reported by the endpoint.
        status: Position in the request lifecycle.
        error: User-facing error message, set only in ``ERROR``.
    """

    query: str = ""
    type_filter: SearchResultType | None = None
    results: list[SearchResult] = field(default_factory=list)
    total_count: int = 0
    status: SearchStatus = SearchStatus.IDLE
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is SearchStatus.LOADING


def parse_type_filter(raw: SearchResultType | str | None) -> SearchResultType | None:
    """Interpret a filter value; "all", blanks and unknown names mean all."""
    if raw is None or isinstance(raw, SearchResultType):
        return raw
    return SearchResultType.parse(raw)


class SearchRequestController:
    """Drives search requests and keeps display state and URL in sync.

    Must be used from a running event loop: ``submit`` schedules the
    request as an ``asyncio.Task`` and returns it.
    """

    def __init__(
        self,
        transport: SearchTransport,
        navigator: Navigator,
        path: str = SEARCH_PATH,
    ) -> None:
        self.state = ClientSearchState()
        self._transport = transport
        self._navigator = navigator
        self._path = path
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def visible_results(self) -> list[SearchResult]:
        """Last results narrowed to the active type filter."""
        if self.state.type_filter is None:
            return list(self.state.results)
        return [r for r in self.state.results if r.type == self.state.type_filter]

    def result_counts(self) -> dict[str, int]:
        """Counts for the filter tabs: all plus one entry per type."""
        counts = {"all": self.state.total_count}
        for result_type in SearchResultType:
            counts[result_type.value] = sum(
                1 for r in self.state.results if r.type == result_type
            )
        return counts

    def mount(self) -> asyncio.Task[None] | None:
        """Restore query and filter from the URL and search if the query is valid.

        Returns:
            The request task, or None if the URL held no usable query.
        """
        params = self._navigator.read_params()
        self.state.type_filter = parse_type_filter(params.get("type"))
        query = normalize_query(params.get("q"))
        self.state.query = query
        return self.submit(query)

    def submit(self, query: str) -> asyncio.Task[None] | None:
        """Start a search for ``query``, superseding any request in flight.

        Queries shorter than two characters after trimming are ignored.

        Returns:
            The request task, or None if nothing was issued.
        """
        if self._closed:
            logger.warning("search_submit_after_close")
            return None

        normalized = normalize_query(query)
        if len(normalized) < MIN_QUERY_LENGTH:
            return None

        self._cancel_current("superseded")
        token = CancellationToken()
        self._token = token

        self.state.query = normalized
        self.state.status = SearchStatus.LOADING
        self.state.error = None
        self._push_url()

        self._task = asyncio.create_task(self._run(normalized, token))
        return self._task

    def change_type_filter(self, type_filter: SearchResultType | str | None) -> None:
        """Show only ``type_filter`` results from the last response; no request."""
        self.state.type_filter = parse_type_filter(type_filter)
        self._push_url()

    def clear(self) -> None:
        """Cancel any request and return to idle with no results."""
        self._cancel_current("cleared")
        self.state.query = ""
        self.state.results = []
        self.state.total_count = 0
        self.state.error = None
        self.state.status = SearchStatus.IDLE
        self._push_url()

    def close(self) -> None:
        """Teardown: cancel any outstanding request and ignore later results."""
        self._cancel_current("closed")
        self._closed = True

    def _is_current(self, token: CancellationToken) -> bool:
        return token is self._token and not token.cancelled and not self._closed

    def _cancel_current(self, reason: str) -> None:
        if self._token is not None:
            self._token.cancel(reason)
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._token = None
        self._task = None

    def _push_url(self) -> None:
        self._navigator.push(
            build_search_url(self.state.query, self.state.type_filter, self._path)
        )

    async def _run(self, query: str, token: CancellationToken) -> None:
        try:
            response = await self._transport(query, token)
        except (asyncio.CancelledError, OperationCancelled):
            if token.cancelled:
                logger.debug("search_request_cancelled", query=query, reason=token.reason)
                return
            raise
        except Exception as e:
            if not self._is_current(token):
                return
            logger.warning("search_request_failed", query=query, error=str(e))
            self.state.results = []
            self.state.total_count = 0
            self.state.error = SEARCH_ERROR_MESSAGE
            self.state.status = SearchStatus.ERROR
            return

        if not self._is_current(token):
            logger.debug("search_response_discarded", query=query)
            return

        self.state.results = list(response.results)
        self.state.total_count = response.count
        self.state.error = None
        self.state.status = SearchStatus.SUCCESS
