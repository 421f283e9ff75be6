"""Statistical reports folded from the full reading history."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Sequence

from weather_relay.core.errors import InvalidFilterError
from weather_relay.services.store import HistoryRow, ReadingStore

logger = logging.getLogger(__name__)

MONTH_AVERAGE_DAY = 0


class TemperatureFilter(str, Enum):
    LOWS = "lows"
    HIGHS = "highs"
    AVERAGES = "avgs"

    @classmethod
    def parse(cls, value: str) -> "TemperatureFilter":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise InvalidFilterError(f"invalid reporting filter: {value}") from exc


COUNT_OPTIONS = ("query", "labels")
SUMMARY_OPTIONS = ("day",)

VALID_QUERY_PARAMETERS = [
    "count=query|labels",
    "summary=day",
    "temp=lows|highs|avgs",
]


class TemperatureSeries(dict):
    """Samples bucketed as city -> year -> month -> day -> [temperatures]."""

    def ensure_path(self, city: str, year: int, month: int, day: int) -> list[float]:
        """Create any missing branch down to the day bucket and return it.

        Existing branches and samples are left untouched.
        """

        years = self.setdefault(city, {})
        months = years.setdefault(year, {})
        days = months.setdefault(month, {})
        return days.setdefault(day, [])

    def add(self, temp: float, city: str, year: int, month: int, day: int) -> None:
        self.ensure_path(city, year, month, day).append(temp)

    def months(self) -> Iterable[tuple[str, int, int, dict[int, list[float]]]]:
        for city, years in self.items():
            for year, months in years.items():
                for month, days in months.items():
                    yield city, year, month, days


def known_labels(rows: Iterable[HistoryRow]) -> list[str]:
    """Distinct labels in order of first appearance."""

    seen: set[str] = set()
    labels: list[str] = []
    for row in rows:
        for label in row.labels:
            if label in seen:
                continue
            seen.add(label)
            labels.append(label)
    return labels


def daily_summary(rows: Iterable[HistoryRow]) -> dict[str, list[dict[str, Any]]]:
    """Group (city, time) sightings by label, newest first."""

    ordered = sorted(
        (row for row in rows if row.city_name),
        key=lambda row: row.at_time,
        reverse=True,
    )
    summary: dict[str, list[dict[str, Any]]] = {}
    for row in ordered:
        for label in row.labels:
            summary.setdefault(label, []).append({"city_name": row.city_name, "date": row.at_time})
    return summary


def temperature_series(rows: Iterable[HistoryRow], temp_filter: TemperatureFilter) -> TemperatureSeries:
    """Bucket the low or high temperature of every reading by day."""

    if temp_filter is TemperatureFilter.LOWS:
        column = "temp_low"
    elif temp_filter is TemperatureFilter.HIGHS:
        column = "temp_high"
    else:
        raise InvalidFilterError(f"invalid reporting filter: {temp_filter.value}")

    series = TemperatureSeries()
    for row in rows:
        if not row.city_name:
            continue
        temp = getattr(row, column)
        if temp is None:
            continue
        at = row.at_time
        series.add(temp, row.city_name, at.year, at.month, at.day)
    return series


def daily_midpoints(rows: Iterable[HistoryRow]) -> TemperatureSeries:
    """Bucket the low/high midpoint of every complete reading by day."""

    series = TemperatureSeries()
    for row in rows:
        if not row.city_name:
            continue
        if row.temp_low is None or row.temp_high is None:
            continue
        at = row.at_time
        series.add((row.temp_low + row.temp_high) / 2, row.city_name, at.year, at.month, at.day)
    return series


def monthly_averages(daily: TemperatureSeries) -> TemperatureSeries:
    """Average each day's samples, then average those per month.

    The result for a month sits alone in day bucket ``0``.
    """

    averages = TemperatureSeries()
    for city, year, month, days in daily.months():
        day_means = [sum(samples) / len(samples) for samples in days.values() if samples]
        if not day_means:
            continue
        averages.add(sum(day_means) / len(day_means), city, year, month, MONTH_AVERAGE_DAY)
    return averages


class StatsService:
    """Compose the statistics document served by the stats endpoint."""

    def __init__(self, store: ReadingStore) -> None:
        self.store = store
        self._history: list[HistoryRow] | None = None

    def _rows(self) -> list[HistoryRow]:
        if self._history is None:
            self._history = self.store.history()
        return self._history

    def total_query_count(self) -> int:
        return self.store.total_query_count()

    def known_labels(self) -> list[str]:
        return known_labels(self._rows())

    def daily_summary(self) -> dict[str, list[dict[str, Any]]]:
        return daily_summary(self._rows())

    def temperatures(self, temp_filter: TemperatureFilter | str) -> TemperatureSeries:
        if not isinstance(temp_filter, TemperatureFilter):
            temp_filter = TemperatureFilter.parse(temp_filter)
        if temp_filter is TemperatureFilter.AVERAGES:
            return monthly_averages(daily_midpoints(self._rows()))
        return temperature_series(self._rows(), temp_filter)

    def build(
        self,
        count: Sequence[str] = (),
        summary: Sequence[str] = (),
        temp: Sequence[str] = (),
    ) -> dict[str, Any]:
        """Build the requested reports. Every option is validated first."""

        counts = _validate(count, COUNT_OPTIONS, "count")
        summaries = _validate(summary, SUMMARY_OPTIONS, "summary")
        filters = [TemperatureFilter.parse(value) for value in temp]

        stats: dict[str, Any] = {}
        if counts:
            stats["count"] = {}
            if "query" in counts:
                stats["count"]["location_queries"] = self.total_query_count()
            if "labels" in counts:
                stats["count"]["labels"] = self.known_labels()
        if "day" in summaries:
            stats["summary"] = {"daily": self.daily_summary()}
        if filters:
            stats["temperatures"] = {f.value: self.temperatures(f) for f in filters}

        logger.debug("Built stats document with sections %s", sorted(stats))
        return stats


def _validate(values: Sequence[str], options: Sequence[str], name: str) -> list[str]:
    selected: list[str] = []
    for value in values:
        key = value.strip().lower()
        if key not in options:
            raise InvalidFilterError(f"invalid {name} option: {value}")
        if key not in selected:
            selected.append(key)
    return selected


__all__ = [
    "StatsService",
    "TemperatureFilter",
    "TemperatureSeries",
    "VALID_QUERY_PARAMETERS",
    "daily_midpoints",
    "daily_summary",
    "known_labels",
    "monthly_averages",
    "temperature_series",
]
