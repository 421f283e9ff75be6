"""Location weather and statistics endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from weather_relay.api.deps import get_stats_service, get_weather_service
from weather_relay.services.aggregation import VALID_QUERY_PARAMETERS, StatsService
from weather_relay.services.weather import WeatherService

router = APIRouter(prefix="/location", tags=["weather"])


class WeatherReportRead(BaseModel):
    city_name: str
    conditions: List[str] = Field(default_factory=list)
    low_temp: float | None = None
    high_temp: float | None = None
    median_temp: float | None = Field(default=None, description="Midpoint of low_temp and high_temp")
    at_time: datetime | None = None


@router.get("/weather", response_model=WeatherReportRead)
def location_weather(
    city: str = Query(..., min_length=1, description="City name, case-insensitive"),
    service: WeatherService = Depends(get_weather_service),
) -> Any:
    report = service.get_weather(city)
    return WeatherReportRead(
        city_name=report.city_name,
        conditions=report.conditions,
        low_temp=report.low_temp,
        high_temp=report.high_temp,
        median_temp=report.median_temp,
        at_time=report.at_time,
    )


@router.get("/weather/stats")
def weather_stats(
    count: list[str] | None = Query(default=None, description="query and/or labels"),
    summary: list[str] | None = Query(default=None, description="day"),
    temp: list[str] | None = Query(default=None, description="lows, highs and/or avgs"),
    service: StatsService = Depends(get_stats_service),
) -> Any:
    if not (count or summary or temp):
        return JSONResponse(status_code=202, content={"valid_query_parameters": VALID_QUERY_PARAMETERS})
    return service.build(count=count or [], summary=summary or [], temp=temp or [])


__all__ = ["router"]
