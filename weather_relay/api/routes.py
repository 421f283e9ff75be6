"""Root API routers."""

from typing import Optional

from fastapi import APIRouter, Query

from weather_relay.core.logging_config import get_log_buffer
from weather_relay.services.weather import normalize_city

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service health probe")
async def healthcheck() -> dict[str, str]:
    """Return a simple heartbeat for orchestration layers."""

    return {"status": "ok"}


@health_router.get("/status", summary="Legacy status probe")
async def status() -> dict[str, str]:
    return {"message": "ok"}


@health_router.get("/logs", summary="Recent log records")
async def recent_logs(
    limit: int = Query(default=100, ge=1, le=200),
    city: Optional[str] = Query(default=None, description="Only records about this city"),
) -> list[dict[str, str]]:
    return get_log_buffer(limit, city=normalize_city(city) if city else None)
