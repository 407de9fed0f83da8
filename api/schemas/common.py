"""
Common schemas shared across API endpoints.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TimeWindow(str, Enum):
    """Time window for trending."""

    day = "day"
    week = "week"


class MovieCategory(str, Enum):
    """Movie catalog categories."""

    popular = "popular"
    top_rated = "top_rated"
    now_playing = "now_playing"
    upcoming = "upcoming"


class TVCategory(str, Enum):
    """TV catalog categories."""

    popular = "popular"
    top_rated = "top_rated"
    on_the_air = "on_the_air"
    airing_today = "airing_today"


class Relation(str, Enum):
    """Details sub-resources."""

    credits = "credits"
    videos = "videos"
    reviews = "reviews"
    similar = "similar"
    recommendations = "recommendations"


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class SuccessResponse(BaseModel):
    """Standard success response."""

    success: bool = True
    message: str
