"""Account and bookmark endpoints."""

from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from weather_relay.api.deps import get_db
from weather_relay.services.accounts import AccountService

router = APIRouter(prefix="/account/user", tags=["accounts"])


class RegisterPayload(BaseModel):
    username: str = Field(min_length=1, max_length=255)


class BookmarkPayload(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    locations: List[str] = Field(default_factory=list)


class AccountRead(BaseModel):
    name: str
    id: int


class RegisteredAccountRead(AccountRead):
    bookmark_collection_id: int
    bookmarked_location_ids: List[int] = Field(default_factory=list)


class BookmarksRead(BaseModel):
    bookmarks: List[str] = Field(default_factory=list)


@router.get("", response_model=AccountRead)
def get_account(username: str = Query(..., min_length=1), session: Session = Depends(get_db)) -> Any:
    account = AccountService(session).get(username)
    return AccountRead(name=account.user_name, id=account.id)


@router.post("/register", response_model=RegisteredAccountRead)
def register_account(payload: RegisterPayload, session: Session = Depends(get_db)) -> Any:
    account, bookmark = AccountService(session).register(payload.username)
    return RegisteredAccountRead(
        name=account.user_name,
        id=account.id,
        bookmark_collection_id=bookmark.id,
        bookmarked_location_ids=bookmark.location_ids,
    )


@router.get("/bookmark", response_model=BookmarksRead)
def list_bookmarks(username: str = Query(..., min_length=1), session: Session = Depends(get_db)) -> Any:
    return BookmarksRead(bookmarks=AccountService(session).bookmarks(username))


@router.post("/bookmark", response_model=BookmarksRead)
def add_bookmarks(payload: BookmarkPayload, session: Session = Depends(get_db)) -> Any:
    names = AccountService(session).add_bookmarks(payload.username, payload.locations)
    return BookmarksRead(bookmarks=names)


__all__ = ["router"]
