"""
Favorites / watchlist Pydantic schemas.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ListName(str, Enum):
    """Which list of a media type."""

    favorites = "favorites"
    watchlist = "watchlist"


class ListRecord(BaseModel):
    """
    A movie or TV record to store.

    Only id is required; every other field of the TMDB record is kept
    as sent.
    """

    id: int = Field(..., description="TMDB id")

    class Config:
        extra = "allow"


class ListEntry(BaseModel):
    """A stored entry: the record plus the time it was added."""

    id: int
    title: str
    added_at: str
    record: Dict[str, Any] = Field(default_factory=dict, description="Stored record as saved")


class ListResponse(BaseModel):
    """All entries of one list, newest first."""

    key: str
    data: List[ListEntry] = []
    total: int = 0
    last_updated: Optional[str] = None


class CountResponse(BaseModel):
    key: str
    count: int


class ToggleResponse(BaseModel):
    """Membership after a toggle."""

    id: int
    member: bool
