"""Location and weather reading tables."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class Location(SQLModel, table=True):
    """A named place tracked for weather queries."""

    __tablename__ = "locations"

    id: Optional[int] = Field(default=None, primary_key=True)
    city_name: str = Field(max_length=255, index=True, unique=True)
    query_count: int = Field(default=0, description="Cache hits plus refreshes served for this city")


class Reading(SQLModel, table=True):
    """Append-only weather snapshot; the newest row per location is current."""

    __tablename__ = "weather"

    id: Optional[int] = Field(default=None, primary_key=True)
    location_id: int = Field(foreign_key="locations.id", index=True, nullable=False)
    labels: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    temp_high: Optional[float] = None
    temp_low: Optional[float] = None
    at_time: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))


__all__ = ["Location", "Reading"]
