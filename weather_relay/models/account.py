"""Account and bookmark tables."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_name: str = Field(max_length=255, index=True, unique=True)


class Bookmark(SQLModel, table=True):
    """Bookmarked locations of one account. Shares the account's id."""

    __tablename__ = "bookmarks"

    id: int = Field(primary_key=True, foreign_key="accounts.id")
    location_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


__all__ = ["Account", "Bookmark"]
