"""Collection fetching with safety-limited pagination and a people cache."""

from typing import Protocol

import structlog

from clubsearch.cms.schemas import CmsDocument, CollectionName, CollectionPage
from clubsearch.search.cache import TTLCache
from clubsearch.search.cancellation import CancellationToken

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 50
MAX_PAGES = 20
PEOPLE_CACHE_KEY = "people:all"

Collection = tuple[CmsDocument, ...]


class PageSource(Protocol):
    """Paginated collection listing provided by the content repository."""

    async def fetch_page(
        self,
        collection: CollectionName,
        page: int,
        page_size: int,
    ) -> CollectionPage[CmsDocument]: ...


class CollectionFetcher:
    """Reads whole collections page by page.

    Pagination follows the has-next-page indicator but never requests
    more than ``max_pages`` pages, so a fetch always terminates even if
    the repository keeps reporting more. Collections larger than
    ``max_pages * page_size`` are therefore returned incomplete.

    The ``people`` collection goes through the injected TTL cache under a
    single static key. Other collections are fetched fresh per request.

    Attributes:
        max_pages: Page limit per fetch.
    """

    def __init__(
        self,
        source: PageSource,
        people_cache: TTLCache[Collection],
        page_sizes: dict[CollectionName, int] | None = None,
        max_pages: int = MAX_PAGES,
    ) -> None:
        """Initialize fetcher.

        Args:
            source: Page provider (normally a ``CmsClient``).
            people_cache: Shared cache for the people collection.
            page_sizes: Per-collection page size overrides.
            max_pages: Page limit per fetch.
        """
        self._source = source
        self._people_cache = people_cache
        self._page_sizes = page_sizes or {}
        self.max_pages = max_pages

    def page_size(self, collection: CollectionName) -> int:
        return self._page_sizes.get(collection, DEFAULT_PAGE_SIZE)

    async def fetch_all(
        self,
        collection: CollectionName,
        token: CancellationToken | None = None,
    ) -> Collection:
        """Return every document of ``collection`` up to the page limit.

        Args:
            collection: Collection to read.
            token: Cancellation token checked before each page.

        Returns:
            Documents in upstream order.

        Raises:
            UpstreamFetchError: If any page fails; nothing partial is returned.
            OperationCancelled: If ``token`` is cancelled mid-fetch.
        """
        token = token or CancellationToken()
        if collection == "people":
            # A shared load outlives any one caller, so it gets its own token.
            load_token = (
                CancellationToken() if self._people_cache.single_flight else token
            )
            return await self._people_cache.get_or_populate(
                PEOPLE_CACHE_KEY,
                lambda: self._paginate(collection, load_token),
            )
        return await self._paginate(collection, token)

    async def _paginate(
        self,
        collection: CollectionName,
        token: CancellationToken,
    ) -> Collection:
        page_size = self.page_size(collection)
        items: list[CmsDocument] = []
        page = 1
        pages_fetched = 0
        has_next = True

        while has_next:
            if page > self.max_pages:
                logger.warning(
                    "collection_fetch_truncated",
                    collection=collection,
                    max_pages=self.max_pages,
                    item_count=len(items),
                )
                break

            token.raise_if_cancelled()
            result = await self._source.fetch_page(collection, page, page_size)
            pages_fetched += 1
            logger.debug(
                "collection_page_fetched",
                collection=collection,
                page=page,
                docs=len(result.docs),
                has_next_page=result.has_next_page,
            )

            if not result.docs:
                break

            items.extend(result.docs)
            has_next = result.has_next_page
            page += 1

        logger.info(
            "collection_fetched",
            collection=collection,
            item_count=len(items),
            pages=pages_fetched,
        )
        return tuple(items)
