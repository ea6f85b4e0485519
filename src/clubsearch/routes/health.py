"""Health check endpoints for liveness and readiness probes."""
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from clubsearch.search.fetcher import PEOPLE_CACHE_KEY

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Details about the check outcome.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Checks that the content repository answers a minimal listing and
    reports whether the people collection is currently cached. Only the
    repository check affects readiness.

    Returns 200 if the repository is reachable, 503 otherwise.

    Returns:
        Readiness status with individual check results.
    """
    cms = request.app.state.cms
    people_cache = request.app.state.people_cache

    reachable = await cms.ping()
    checks = [
        ReadinessCheck(
            name=f"cms:{cms.base_url}",
            status="ok" if reachable else "failed",
            message=None if reachable else "Content repository unreachable",
        ),
        ReadinessCheck(
            name="cache:people",
            status="ok",
            message="warm" if people_cache.get(PEOPLE_CACHE_KEY) is not None else "cold",
        ),
    ]
    response = ReadinessResponse(
        status="ready" if reachable else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if reachable else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
