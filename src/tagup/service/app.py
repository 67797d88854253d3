"""FastAPI application exposing tag upgrade suggestions.

Endpoints:
- POST /upgrade - Suggested tags for a feature
- POST /generic - Whether the feature's name is generic
- GET /health - Service health status
- GET /status - Dataset load status and index statistics

The dataset starts loading in the background at startup; /upgrade and
/generic answer 503 until it is ready.

Usage:
    uv run uvicorn tagup.service.app:app --port 8000
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from tagup.service.lifecycle import SuggestionService

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


class UpgradeRequest(BaseModel):
    """Request body for /upgrade endpoint."""
    tags: dict[str, str] = Field(..., description="The feature's current tags")
    loc: tuple[float, float] | None = Field(default=None, description="Feature location as [lon, lat]")


class UpgradeResponse(BaseModel):
    """Response body for /upgrade endpoint."""
    changed: bool
    tags: dict[str, str]


class GenericRequest(BaseModel):
    """Request body for /generic endpoint."""
    tags: dict[str, str]


class GenericResponse(BaseModel):
    """Response body for /generic endpoint."""
    generic: bool


class HealthResponse(BaseModel):
    """Response body for /health endpoint."""
    status: str = Field(..., description="'ready', 'starting' or 'failed'")


class StatusResponse(BaseModel):
    """Response body for /status endpoint."""
    status: str
    categories: int
    items: int
    dissolved: int
    replacements: int


def _require_ready(service: SuggestionService) -> None:
    status = service.status()
    if status != "ok":
        raise HTTPException(status_code=503, detail=f"Dataset not ready (status={status})")


def create_app(service: SuggestionService | None = None) -> FastAPI:
    """Build the application around a service.

    Args:
        service: Service to expose; built from environment settings when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start loading the dataset; cancel the load on shutdown."""
        svc: SuggestionService = app.state.service
        load_task = None
        if not svc.started:
            load_task = asyncio.create_task(svc.load())
            logger.info("[Service] Dataset load started")
        yield

        if load_task is not None and not load_task.done():
            load_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await load_task
        logger.info("[Service] Shutdown complete")

    app = FastAPI(
        title="tagup",
        description="Canonical tag upgrade suggestions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service or SuggestionService.from_settings()

    @app.post("/upgrade", response_model=UpgradeResponse)
    async def upgrade(request: UpgradeRequest) -> UpgradeResponse:
        """Suggest upgraded tags. Unchanged features echo their tags back."""
        svc: SuggestionService = app.state.service
        _require_ready(svc)
        new_tags = svc.upgrade(request.tags, request.loc)
        return UpgradeResponse(
            changed=new_tags is not None,
            tags=new_tags if new_tags is not None else request.tags,
        )

    @app.post("/generic", response_model=GenericResponse)
    async def generic(request: GenericRequest) -> GenericResponse:
        svc: SuggestionService = app.state.service
        _require_ready(svc)
        return GenericResponse(generic=svc.is_generic(request.tags))

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Get service health status."""
        status = app.state.service.status()
        return HealthResponse(
            status={"ok": "ready", "loading": "starting"}.get(status, status)
        )

    @app.get("/status", response_model=StatusResponse)
    async def status() -> StatusResponse:
        """Get dataset load status and index statistics."""
        svc: SuggestionService = app.state.service
        indices = svc.raw_indices()
        return StatusResponse(
            status=svc.status(),
            categories=len(indices.data),
            items=len(indices.item_by_id),
            dissolved=len(indices.dissolved),
            replacements=len(indices.replacements),
        )

    return app


app = create_app()
