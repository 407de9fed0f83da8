"""
Catalog endpoints shared by movies and TV.

Each media type gets the same set of routes:
- GET /{path}/trending
- GET /{path}/{category}
- GET /{path}/{id}
- GET /{path}/{id}/{relation}

TMDB payloads are returned as received.
"""

from enum import Enum
from typing import Optional, Type

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_api
from api.schemas.common import ErrorResponse, Relation, TimeWindow
from tmdb_browser.catalog import CATEGORIES
from tmdb_browser.models import MediaType
from tmdb_browser.tmdb import TMDBApi


def create_catalog_router(media_type: MediaType, path: str, categories: Type[Enum]) -> APIRouter:
    """
    Build the catalog router for one media type.

    Args:
        media_type: movie or tv
        path: URL segment ("movies" or "tv")
        categories: Enum of the category names valid for this media type
    """
    router = APIRouter(responses={
        404: {"model": ErrorResponse, "description": "Unknown id"},
        502: {"model": ErrorResponse, "description": "TMDB request failed"},
    })
    methods = CATEGORIES[media_type]
    label = "movie" if media_type == MediaType.MOVIE else "series"

    @router.get(f"/{path}/trending", summary=f"Trending {path}")
    def get_trending(
        time_window: TimeWindow = Query(TimeWindow.week, description="day or week"),
        page: int = Query(1, ge=1, description="Page number"),
        api: TMDBApi = Depends(get_api),
    ):
        return api.get_trending(media_type, time_window.value, page)

    @router.get(f"/{path}/{{item_id:int}}", summary=f"{label.title()} details")
    def get_details(
        item_id: int,
        api: TMDBApi = Depends(get_api),
    ):
        return api.get_details(media_type, item_id)

    @router.get(f"/{path}/{{item_id:int}}/{{relation}}", summary=f"{label.title()} credits, videos, reviews, similar or recommendations")
    def get_related(
        item_id: int,
        relation: Relation,
        page: Optional[int] = Query(None, ge=1, description="Page number (reviews, similar, recommendations)"),
        api: TMDBApi = Depends(get_api),
    ):
        return api.get_related(media_type, item_id, relation.value, page)

    @router.get(f"/{path}/{{category}}", summary=f"{label.title()} catalog category")
    def get_category(
        category: categories,
        page: int = Query(1, ge=1, description="Page number"),
        api: TMDBApi = Depends(get_api),
    ):
        return getattr(api, methods[category.value])(page)

    return router
