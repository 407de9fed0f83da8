"""
Search endpoints.

A blank query answers with an empty page and never reaches TMDB.
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_api
from tmdb_browser.models import MediaType
from tmdb_browser.tmdb import TMDBApi

router = APIRouter()
logger = logging.getLogger("tmdb_browser.api.search")

EMPTY_PAGE = {"page": 1, "results": [], "total_pages": 0, "total_results": 0}


def _search(api: TMDBApi, media_type: MediaType, query: str, page: int) -> dict:
    if not query.strip():
        return dict(EMPTY_PAGE)
    logger.debug(f"Search {media_type.value}: {query!r} page={page}")
    return api.search(media_type, query, page)


@router.get("/search/movies")
def search_movies(
    query: str = Query("", description="Title to search for"),
    page: int = Query(1, ge=1, description="Page number"),
    api: TMDBApi = Depends(get_api),
):
    """
    Search movies by title.
    """
    return _search(api, MediaType.MOVIE, query, page)


@router.get("/search/tv")
def search_tv(
    query: str = Query("", description="Name to search for"),
    page: int = Query(1, ge=1, description="Page number"),
    api: TMDBApi = Depends(get_api),
):
    """
    Search TV series by name.
    """
    return _search(api, MediaType.TV, query, page)
