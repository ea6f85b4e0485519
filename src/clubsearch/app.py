"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from clubsearch.cms.client import CmsClient
from clubsearch.cms.schemas import COLLECTION_MODELS
from clubsearch.config import Settings
from clubsearch.middleware.cors import configure_cors
from clubsearch.middleware.logging import RequestLoggingMiddleware
from clubsearch.routes import health, search
from clubsearch.search import (
    CollectionFetcher,
    ResultAggregator,
    SearchService,
    TTLCache,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Builds the content repository client (unless one was injected), the
    shared people cache, and the search service on startup. On shutdown
    the cache is cleared and a client created here is closed.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    injected: CmsClient | None = app.state.cms
    cms = injected or CmsClient(
        settings.cms_url,
        timeout=settings.cms_timeout,
        max_retries=settings.cms_max_retries,
        backoff_base=settings.cms_backoff_base,
    )

    people_cache: TTLCache = TTLCache(
        ttl=settings.search_cache_ttl,
        single_flight=settings.search_cache_single_flight,
    )
    fetcher = CollectionFetcher(
        cms,
        people_cache,
        page_sizes={name: settings.search_page_size for name in COLLECTION_MODELS},
        max_pages=settings.search_max_pages,
    )

    app.state.cms = cms
    app.state.people_cache = people_cache
    app.state.search_service = SearchService(ResultAggregator(fetcher))
    logger.info(
        "search_service_ready",
        cms_url=cms.base_url,
        cache_ttl=people_cache.ttl,
        single_flight=people_cache.single_flight,
    )

    try:
        yield
    finally:
        people_cache.clear()
        if injected is None:
            await cms.aclose()
        app.state.cms = injected
        logger.info("api_shutdown")


def create_app(settings: Settings | None = None, cms: CmsClient | None = None) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.
        cms: Content repository client to use instead of building one.
            The caller keeps ownership and closes it.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Club Search API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.cms = cms

    configure_cors(app, settings.cors_origins)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")

    return app
