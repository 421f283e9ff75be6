"""Database models."""

from .account import Account, Bookmark
from .location import Location, Reading

__all__ = [
    "Account",
    "Bookmark",
    "Location",
    "Reading",
]
