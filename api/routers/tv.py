"""
TV series endpoints.

The catalog routes plus season and episode lookups.
"""

from fastapi import Depends

from api.dependencies import get_api
from api.routers.catalog import create_catalog_router
from api.schemas.common import TVCategory
from tmdb_browser.models import MediaType
from tmdb_browser.tmdb import TMDBApi

router = create_catalog_router(MediaType.TV, "tv", TVCategory)


@router.get("/tv/{tv_id:int}/season/{season_number:int}")
def get_season(
    tv_id: int,
    season_number: int,
    api: TMDBApi = Depends(get_api),
):
    """
    Get one season with its episodes.
    """
    return api.get_season_details(tv_id, season_number)


@router.get("/tv/{tv_id:int}/season/{season_number:int}/episode/{episode_number:int}")
def get_episode(
    tv_id: int,
    season_number: int,
    episode_number: int,
    api: TMDBApi = Depends(get_api),
):
    return api.get_episode_details(tv_id, season_number, episode_number)
