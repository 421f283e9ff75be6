"""Cache-or-fetch weather for a single city."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

from weather_relay.core.errors import InvalidFilterError, ProviderError, StorageError
from weather_relay.services.provider import WeatherGateway
from weather_relay.services.store import LocationWeather, ReadingStore, as_utc

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_city(city_name: str) -> str:
    """Title-case each word: ``"new york"`` -> ``"New York"``."""

    return " ".join(word[:1].upper() + word[1:].lower() for word in city_name.strip().split())


@dataclass
class WeatherReport:
    """Outbound summary of one city's current reading."""

    city_name: str
    conditions: list[str] = field(default_factory=list)
    low_temp: float | None = None
    high_temp: float | None = None
    median_temp: float | None = None
    at_time: datetime | None = None
    query_count: int = 0
    cached: bool = False


class RefreshLocks:
    """Per-city locks so concurrent stale requests share one provider call.

    An entry lives only while some request holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, city_name: str) -> Iterator[None]:
        with self._guard:
            lock, waiters = self._locks.get(city_name, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[city_name] = (lock, waiters + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                _, waiters = self._locks[city_name]
                if waiters <= 1:
                    del self._locks[city_name]
                else:
                    self._locks[city_name] = (lock, waiters - 1)


class WeatherService:
    """Serve a city's weather from the reading store, refreshing when stale."""

    def __init__(
        self,
        store: ReadingStore,
        gateway: WeatherGateway,
        ttl: timedelta = DEFAULT_TTL,
        locks: RefreshLocks | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.ttl = ttl
        self.locks = locks or RefreshLocks()
        self.clock = clock

    def get_weather(self, city_name: str) -> WeatherReport:
        city = normalize_city(city_name)
        if not city:
            raise InvalidFilterError("a city name is required")

        cached, fresh = self.get_or_mark_stale(city)
        if fresh:
            return self._to_report(city, cached, cached=True)

        with self.locks.hold(city):
            # Another request may have refreshed while we waited.
            cached, fresh = self.get_or_mark_stale(city)
            if fresh:
                return self._to_report(city, cached, cached=True)
            refreshed = self.refresh(city)
        return self._to_report(city, refreshed, cached=False)

    def get_or_mark_stale(self, city_name: str) -> tuple[LocationWeather | None, bool]:
        """Return the newest reading and whether it is still within the TTL.

        A fresh hit counts as a query against the location.
        """

        city = normalize_city(city_name)
        result = self.store.latest(city)
        if result.is_empty:
            logger.debug("No cached reading for %s", city, extra={"city": city})
            return None, False

        age = self.clock() - as_utc(result.reading.at_time)
        if age >= self.ttl:
            logger.debug("Cached reading for %s is stale (age=%s)", city, age, extra={"city": city})
            return result, False

        self.store.increment_query_count(result.location)
        logger.info("Serving cached weather for %s (age=%s)", city, age, extra={"city": city})
        return result, True

    def refresh(self, city_name: str) -> LocationWeather:
        """Fetch current conditions and write them back atomically."""

        city = normalize_city(city_name)
        report = self.gateway.fetch_current(city)
        if not report.ok:
            logger.warning(
                "OpenWeather rejected %s with code %s: %s",
                city,
                report.status_code,
                report.message,
                extra={"city": city},
            )
            raise ProviderError(report.message)

        result = self.store.record_refresh(
            city,
            temp_low=report.temp_min,
            temp_high=report.temp_max,
            labels=report.labels,
            at_time=self.clock(),
        )
        logger.info(
            "Refreshed weather for %s (query_count=%s)",
            city,
            result.location.query_count if result.location else None,
            extra={"city": city},
        )
        return result

    def _to_report(self, city: str, result: LocationWeather | None, cached: bool) -> WeatherReport:
        if result is None or result.is_empty:
            raise StorageError(f"no reading available for {city}")
        reading = result.reading
        return WeatherReport(
            city_name=city,
            conditions=list(reading.labels or []),
            low_temp=reading.temp_low,
            high_temp=reading.temp_high,
            median_temp=median_temperature(reading.temp_low, reading.temp_high),
            at_time=as_utc(reading.at_time),
            query_count=result.location.query_count,
            cached=cached,
        )


def median_temperature(low: float | None, high: float | None) -> float | None:
    """Midpoint of the low/high pair, reported as the "median" temperature."""

    if low is None or high is None:
        return None
    return (low + high) / 2


__all__ = [
    "WeatherService",
    "WeatherReport",
    "RefreshLocks",
    "median_temperature",
    "normalize_city",
    "utcnow",
]
