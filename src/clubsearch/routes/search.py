"""Search API endpoint."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from clubsearch.search.pipeline import Err
from clubsearch.search.schemas import ErrorResponse, SearchResponse
from clubsearch.search.service import SearchValidationError

if TYPE_CHECKING:
    from clubsearch.search.service import SearchService

logger = structlog.get_logger()

router = APIRouter(tags=["search"])

INTERNAL_ERROR = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Search articles, people and teams",
    description=(
        "Case-insensitive substring search across news articles, players "
        "and staff, and teams. Results are ranked exact title match first, "
        "then title prefix match, then alphabetically."
    ),
)
async def search(
    request: Request,
    q: str | None = Query(
        default=None,
        description="Search query (at least 2 characters after trimming)",
    ),
    type_: str | None = Query(
        default=None,
        alias="type",
        description="Restrict to one content type: article, person or team",
    ),
) -> SearchResponse | JSONResponse:
    """Search across all content types.

    Args:
        request: FastAPI request (provides access to app state).
        q: Raw search query.
        type_: Optional content type filter, case-insensitive.

    Returns:
        Ranked results, or an error body with status 400 or 500.
    """
    service: SearchService = request.app.state.search_service
    start = time.perf_counter()

    try:
        outcome = await service.search(q, type_)
    except Exception:
        logger.exception("search_failed", query=q, type=type_)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    if isinstance(outcome, Err):
        error = outcome.error
        if isinstance(error, SearchValidationError):
            logger.info("search_rejected", query=q, type=type_, reason=str(error))
            return _error(status.HTTP_400_BAD_REQUEST, str(error))

        logger.error(
            "search_failed",
            query=q,
            type=type_,
            error=str(error),
            error_type=error.__class__.__name__,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    response = outcome.value
    logger.info(
        "search_completed",
        query=response.query,
        type=type_ or "all",
        count=response.count,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response
