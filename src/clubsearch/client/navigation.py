"""Navigable URL contract used to keep search state in the address bar."""

from collections.abc import Mapping
from typing import Protocol
from urllib.parse import parse_qs, urlencode, urlsplit

from clubsearch.search.schemas import SearchResultType

SEARCH_PATH = "/search"


class Navigator(Protocol):
    """Reads and writes the current page URL."""

    def read_params(self) -> Mapping[str, str]:
        """Query parameters of the current URL, first value per key."""
        ...

    def push(self, url: str) -> None:
        """Navigate to ``url`` (path plus query string)."""
        ...


def build_search_url(
    query: str,
    type_filter: SearchResultType | None,
    path: str = SEARCH_PATH,
) -> str:
    """Canonical search URL: ``?q=<query>`` then ``&type=<type>`` unless all.

    Args:
        query: Normalized query; omitted when empty.
        type_filter: Active filter; None means all types.
        path: Page path the query string is appended to.

    Returns:
        Path with percent-encoded query string, or the bare path.
    """
    params: dict[str, str] = {}
    if query:
        params["q"] = query
    if type_filter is not None:
        params["type"] = type_filter.value
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


class InMemoryNavigator:
    """Navigator backed by a URL string, with a history of pushed URLs.

    Used by tests and headless callers that have no browser location.
    """

    def __init__(self, url: str = SEARCH_PATH) -> None:
        self.url = url
        self.history: list[str] = []

    def read_params(self) -> dict[str, str]:
        parsed = parse_qs(urlsplit(self.url).query, keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    def push(self, url: str) -> None:
        self.history.append(url)
        self.url = url
