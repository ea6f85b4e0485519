"""Client-side search request controller and URL synchronization."""

from clubsearch.client.controller import (
    SEARCH_ERROR_MESSAGE,
    ClientSearchState,
    HttpSearchTransport,
    SearchRequestController,
    SearchRequestFailed,
    SearchStatus,
    SearchTransport,
)
from clubsearch.client.navigation import InMemoryNavigator, Navigator, build_search_url

__all__ = [
    "SEARCH_ERROR_MESSAGE",
    "ClientSearchState",
    "HttpSearchTransport",
    "InMemoryNavigator",
    "Navigator",
    "SearchRequestController",
    "SearchRequestFailed",
    "SearchStatus",
    "SearchTransport",
    "build_search_url",
]
