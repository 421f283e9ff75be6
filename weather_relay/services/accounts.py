"""Account registration and location bookmarks."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from weather_relay.core.errors import NotFoundError, StorageError
from weather_relay.models import Account, Bookmark
from weather_relay.services.store import ReadingStore
from weather_relay.services.weather import normalize_city

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.store = ReadingStore(session)

    def register(self, username: str) -> tuple[Account, Bookmark]:
        """Create the account and its empty bookmark collection if missing."""

        try:
            account = self._find(username)
            if account is None:
                account = Account(user_name=username)
                self.session.add(account)
                self.session.flush()
                logger.info("Registered account %s (id=%s)", username, account.id)
            bookmark = self.session.get(Bookmark, account.id)
            if bookmark is None:
                bookmark = Bookmark(id=account.id, location_ids=[])
                self.session.add(bookmark)
            self.session.commit()
            self.session.refresh(account)
            self.session.refresh(bookmark)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"failed to register account {username}: {exc}") from exc
        return account, bookmark

    def get(self, username: str) -> Account:
        try:
            account = self._find(username)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to look up account {username}: {exc}") from exc
        if account is None:
            raise NotFoundError(f"no account found with that username: {username}")
        return account

    def bookmarks(self, username: str) -> list[str]:
        bookmark = self._bookmark_for(self.get(username))
        return self.store.city_names_for(bookmark.location_ids)

    def add_bookmarks(self, username: str, city_names: Iterable[str]) -> list[str]:
        """Bookmark the named locations. Names never queried are ignored."""

        bookmark = self._bookmark_for(self.get(username))
        new_ids = self.store.location_ids_for(normalize_city(name) for name in city_names)
        merged = list(bookmark.location_ids)
        merged.extend(i for i in new_ids if i not in merged)
        # Reassign so the JSON column is flagged dirty.
        bookmark.location_ids = merged
        try:
            self.session.add(bookmark)
            self.session.commit()
            self.session.refresh(bookmark)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"failed to update bookmarks for {username}: {exc}") from exc
        return self.store.city_names_for(bookmark.location_ids)

    def _find(self, username: str) -> Account | None:
        return self.session.exec(select(Account).where(Account.user_name == username)).first()

    def _bookmark_for(self, account: Account) -> Bookmark:
        try:
            bookmark = self.session.get(Bookmark, account.id)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to read bookmarks: {exc}") from exc
        if bookmark is None:
            raise NotFoundError(f"no bookmark collection associated with that id: {account.id}")
        return bookmark


__all__ = ["AccountService"]
