"""Durable per-location readings backed by SQLModel."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from weather_relay.core.errors import StorageError
from weather_relay.models import Location, Reading

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values; SQLite drops the offset on read."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class LocationWeather:
    """A location paired with its most recent reading, either may be absent."""

    location: Location | None = None
    reading: Reading | None = None

    @property
    def is_empty(self) -> bool:
        return self.location is None or self.reading is None


@dataclass
class HistoryRow:
    """One reading joined with its location's name."""

    city_name: str | None
    at_time: datetime
    labels: list[str] = field(default_factory=list)
    temp_low: float | None = None
    temp_high: float | None = None


class ReadingStore:
    """Point lookups, counters and append-only writes for weather readings."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def latest(self, city_name: str) -> LocationWeather:
        """Return the location and its newest reading, scoped to that location."""

        stmt = (
            select(Location, Reading)
            .join(Reading, Reading.location_id == Location.id)
            .where(Location.city_name == city_name)
            .order_by(Reading.at_time.desc(), Reading.id.desc())
            .limit(1)
        )
        try:
            row = self.session.exec(stmt).first()
        except SQLAlchemyError as exc:
            logger.warning("Latest reading lookup failed for %s: %s", city_name, exc)
            raise StorageError(f"failed to read cached weather for {city_name}: {exc}") from exc
        if row is None:
            return LocationWeather()
        location, reading = row
        return LocationWeather(location=location, reading=reading)

    def increment_query_count(self, location: Location) -> Location:
        """Count one more query against ``location`` and persist it immediately."""

        stmt = (
            update(Location)
            .where(Location.id == location.id)
            .values(query_count=Location.query_count + 1)
        )
        try:
            self.session.exec(stmt)
            self.session.commit()
            self.session.refresh(location)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Query counter update failed for %s: %s", location.city_name, exc)
            raise StorageError(f"failed to update query count for {location.city_name}: {exc}") from exc
        return location

    def record_refresh(
        self,
        city_name: str,
        temp_low: float | None,
        temp_high: float | None,
        labels: Iterable[str],
        at_time: datetime,
    ) -> LocationWeather:
        """Upsert the location and append a reading in a single transaction.

        Either both rows are written or neither is.
        """

        try:
            location = self._upsert_location(city_name)
            reading = self._append_reading(location, temp_low, temp_high, list(labels), at_time)
            self.session.commit()
            self.session.refresh(location)
            self.session.refresh(reading)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Refresh write rolled back for %s: %s", city_name, exc)
            raise StorageError(f"failed to cache weather for {city_name}: {exc}") from exc
        return LocationWeather(location=location, reading=reading)

    def _upsert_location(self, city_name: str) -> Location:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:  # pragma: no cover - only postgres and sqlite are deployed
            raise StorageError(f"unsupported database dialect: {dialect}")

        stmt = insert(Location).values(city_name=city_name, query_count=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=["city_name"],
            set_={"query_count": Location.query_count + 1},
        )
        self.session.exec(stmt)
        location = self.session.exec(
            select(Location).where(Location.city_name == city_name).execution_options(populate_existing=True)
        ).one()
        return location

    def _append_reading(
        self,
        location: Location,
        temp_low: float | None,
        temp_high: float | None,
        labels: list[str],
        at_time: datetime,
    ) -> Reading:
        reading = Reading(
            location_id=location.id,
            labels=labels,
            temp_low=temp_low,
            temp_high=temp_high,
            at_time=as_utc(at_time),
        )
        self.session.add(reading)
        self.session.flush()
        return reading

    def total_query_count(self) -> int:
        stmt = select(func.sum(Location.query_count)).where(Location.city_name.is_not(None))
        try:
            total = self.session.exec(stmt).one()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to count location queries: {exc}") from exc
        return int(total or 0)

    def history(self) -> list[HistoryRow]:
        """Every reading joined with its location, newest first."""

        stmt = (
            select(Location.city_name, Reading.at_time, Reading.labels, Reading.temp_low, Reading.temp_high)
            .join(Reading, Reading.location_id == Location.id)
            .where(Location.city_name.is_not(None))
            .order_by(Reading.at_time.desc())
        )
        try:
            rows = self.session.exec(stmt).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to read weather history: {exc}") from exc
        return [
            HistoryRow(
                city_name=city_name,
                at_time=as_utc(at_time),
                labels=list(labels or []),
                temp_low=temp_low,
                temp_high=temp_high,
            )
            for city_name, at_time, labels, temp_low, temp_high in rows
        ]

    def location_ids_for(self, city_names: Iterable[str]) -> list[int]:
        names = list(city_names)
        if not names:
            return []
        try:
            rows = self.session.exec(select(Location.id).where(Location.city_name.in_(names))).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to resolve location names: {exc}") from exc
        return [row for row in rows if row is not None]

    def city_names_for(self, location_ids: Iterable[int]) -> list[str]:
        ids = list(location_ids)
        if not ids:
            return []
        try:
            rows = self.session.exec(
                select(Location.city_name).where(Location.id.in_(ids)).order_by(Location.id)
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to resolve location ids: {exc}") from exc
        return [row for row in rows if row is not None]


__all__ = ["ReadingStore", "LocationWeather", "HistoryRow", "as_utc"]
