"""HTTP client for paginated collection listings in the content repository.

Every listing is requested as
``GET {base_url}/api/{collection}?page=N&limit=M&depth=1`` and answered
with ``{"docs": [...], "hasNextPage": bool}``. Transient failures
(network errors, timeouts, 5xx) are retried with exponential backoff;
client errors and malformed payloads fail immediately.
"""

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import structlog
from pydantic import ValidationError

from clubsearch.cms.errors import (
    UpstreamDecodeError,
    UpstreamFetchError,
    UpstreamHTTPError,
    UpstreamTransportError,
)
from clubsearch.cms.schemas import (
    COLLECTION_MODELS,
    CmsDocument,
    CollectionName,
    CollectionPage,
)

logger = structlog.get_logger()

POPULATE_DEPTH = 1


class CmsClient:
    """Async client for the content repository's collection API.

    Owns its ``httpx.AsyncClient`` unless one is injected; call
    ``aclose()`` at shutdown either way.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        http: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Repository root URL, without the ``/api`` suffix.
            timeout: Per-request timeout in seconds.
            max_retries: Retries after the first attempt for transient errors.
            backoff_base: Delay before the first retry, doubled per retry.
            http: Pre-built HTTP client (tests inject a mock transport).
            sleep: Awaitable used between retries.
        """
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._sleep = sleep
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_page(
        self,
        collection: CollectionName,
        page: int,
        page_size: int,
    ) -> CollectionPage[CmsDocument]:
        """Fetch and decode one page of a collection.

        Args:
            collection: Collection to list.
            page: 1-based page number.
            page_size: Documents per page.

        Returns:
            Decoded page with its has-next-page indicator.

        Raises:
            UpstreamFetchError: If the page cannot be fetched or decoded
                after all retries.
        """
        attempt = 0
        while True:
            try:
                return await self._fetch_once(collection, page, page_size)
            except (UpstreamTransportError, UpstreamHTTPError) as e:
                if isinstance(e, UpstreamHTTPError) and not e.retryable:
                    raise
                if attempt >= self._max_retries:
                    logger.error(
                        "cms_request_failed",
                        collection=collection,
                        page=page,
                        attempts=attempt + 1,
                        error=str(e),
                    )
                    raise
                delay = self._backoff_base * (2**attempt)
                attempt += 1
                logger.warning(
                    "cms_request_retry",
                    collection=collection,
                    page=page,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=str(e),
                )
                await self._sleep(delay)

    async def _fetch_once(
        self,
        collection: CollectionName,
        page: int,
        page_size: int,
    ) -> CollectionPage[CmsDocument]:
        url = f"{self._base_url}/api/{collection}"
        params = {"page": page, "limit": page_size, "depth": POPULATE_DEPTH}

        try:
            response = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamTransportError(
                f"Request to {url} timed out", collection, page
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(
                f"Failed to fetch from {url}: {e}", collection, page
            ) from e

        if not response.is_success:
            raise UpstreamHTTPError(
                f"HTTP {response.status_code} from {url}",
                collection,
                page,
                response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamDecodeError(
                "Failed to parse JSON response", collection, page
            ) from e

        model = COLLECTION_MODELS[collection]
        try:
            return CollectionPage[model].model_validate(payload)  # type: ignore[valid-type]
        except ValidationError as e:
            raise UpstreamDecodeError(
                f"Schema validation failed: {e.error_count()} error(s)",
                collection,
                page,
            ) from e

    async def ping(self) -> bool:
        """Check that the repository answers a minimal listing.

        Returns:
            True if a one-item team listing succeeds without retries.
        """
        try:
            await self._fetch_once("teams", 1, 1)
        except UpstreamFetchError as e:
            logger.warning("cms_ping_failed", error=str(e))
            return False
        return True

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()
