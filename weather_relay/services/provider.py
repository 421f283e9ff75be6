"""OpenWeather current-conditions client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from weather_relay.core.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class ProviderReport:
    """Normalized answer from the weather provider."""

    status_code: int
    temp_min: float | None = None
    temp_max: float | None = None
    labels: list[str] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class WeatherGateway(Protocol):
    def fetch_current(self, city_name: str) -> ProviderReport:  # pragma: no cover - protocol
        ...


class OpenWeatherClient:
    """Fetch current conditions for a city name from OpenWeather."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.openweathermap.org/data/2.5/weather",
        timeout: float = 10.0,
        units: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.units = units
        self._client = client

    def fetch_current(self, city_name: str) -> ProviderReport:
        params = {"q": city_name, "appid": self.api_key}
        if self.units:
            params["units"] = self.units

        try:
            logger.debug("Fetching OpenWeather conditions for %s", city_name)
            if self._client is not None:
                response = self._client.get(self.url, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(self.url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Failed to reach OpenWeather for %s: %s", city_name, exc, exc_info=True)
            raise ProviderError(f"failed to communicate with the openweather api: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning(
                "OpenWeather returned a non-JSON body for %s: %s %s",
                city_name,
                response.status_code,
                response.text[:500],
            )
            raise ProviderError(
                f"openweather api returned an unreadable response (HTTP {response.status_code})"
            ) from exc

        return parse_report(payload, fallback_status=response.status_code)


def parse_report(payload: Any, fallback_status: int = 200) -> ProviderReport:
    """Normalize an OpenWeather ``/weather`` payload.

    ``cod`` is sometimes a string (``"404"``); the HTTP status is used when it
    is missing or unparseable.
    """

    if not isinstance(payload, dict):
        return ProviderReport(status_code=fallback_status, message="unexpected payload shape")

    status = _coerce_int(payload.get("cod"))
    if status is None:
        status = fallback_status

    main = payload.get("main") or {}
    labels = [
        entry["main"]
        for entry in payload.get("weather") or []
        if isinstance(entry, dict) and entry.get("main")
    ]
    message = payload.get("message")

    return ProviderReport(
        status_code=status,
        temp_min=_coerce_float(main.get("temp_min")),
        temp_max=_coerce_float(main.get("temp_max")),
        labels=labels,
        message=str(message) if message else None,
    )


def _coerce_int(value: Any) -> int | None:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _coerce_float(value: Any) -> float | None:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


__all__ = ["OpenWeatherClient", "ProviderReport", "WeatherGateway", "parse_report"]
