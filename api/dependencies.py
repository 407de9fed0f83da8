"""
Dependency injection for the API.

The application state is built once per process from the environment and
handed to endpoints through these dependency functions. Tests override
get_state (or get_config) on the app.
"""

from functools import lru_cache

from fastapi import Depends

from api.schemas.lists import ListName
from tmdb_browser.config import Config
from tmdb_browser.lists import ListStorageService, ListType
from tmdb_browser.models import MediaType
from tmdb_browser.state import AppState, build_app_state
from tmdb_browser.tmdb import TMDBApi


@lru_cache()
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()


@lru_cache()
def get_state() -> AppState:
    """Get cached application state."""
    return build_app_state(get_config())


def get_api(state: AppState = Depends(get_state)) -> TMDBApi:
    return state.api


def get_list_service(
    media: MediaType,
    list_name: ListName,
    state: AppState = Depends(get_state),
) -> ListStorageService:
    """List service for the {media}/{list_name} path parameters."""
    return state.lists[ListType.lookup(media, list_name.value)]
