"""API dependencies."""

from __future__ import annotations

from collections.abc import Generator
from datetime import timedelta

from fastapi import Depends, Request
from sqlmodel import Session

from weather_relay.db.session import get_session
from weather_relay.services.aggregation import StatsService
from weather_relay.services.provider import WeatherGateway
from weather_relay.services.store import ReadingStore
from weather_relay.services.weather import WeatherService


def get_db(request: Request) -> Generator[Session, None, None]:
    with get_session(request.app.state.engine) as session:
        yield session


def get_gateway(request: Request) -> WeatherGateway:
    return request.app.state.gateway


def get_weather_service(
    request: Request,
    session: Session = Depends(get_db),
    gateway: WeatherGateway = Depends(get_gateway),
) -> WeatherService:
    return WeatherService(
        store=ReadingStore(session),
        gateway=gateway,
        ttl=timedelta(seconds=request.app.state.settings.weather_cache_ttl_seconds),
        locks=request.app.state.refresh_locks,
    )


def get_stats_service(session: Session = Depends(get_db)) -> StatsService:
    return StatsService(ReadingStore(session))
