"""Pydantic schemas for API request and response validation."""

from api.schemas.common import (
    ErrorResponse,
    MovieCategory,
    Relation,
    SuccessResponse,
    TimeWindow,
    TVCategory,
)
from api.schemas.lists import (
    CountResponse,
    ListEntry,
    ListName,
    ListRecord,
    ListResponse,
    ToggleResponse,
)

__all__ = [
    "ErrorResponse",
    "MovieCategory",
    "Relation",
    "SuccessResponse",
    "TimeWindow",
    "TVCategory",
    "CountResponse",
    "ListEntry",
    "ListName",
    "ListRecord",
    "ListResponse",
    "ToggleResponse",
]
