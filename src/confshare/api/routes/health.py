"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: always returns 200 if the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(req: Request) -> dict[str, str]:
    """Readiness probe. Reports ``degraded`` when the store failed to load."""
    config_router = req.app.state.config_router
    status = "ready" if config_router.available else "degraded"
    return {"status": status, "authority": config_router.authority}
