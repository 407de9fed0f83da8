"""
TMDB Browser - Movie and TV browsing backed by the TMDB API.

This package provides:
- A TMDB client with a pluggable data source (live HTTP or fixture data)
- Paginated catalogs, trending, details pages and search
- Favorites and watchlists for movies and TV series in a local key-value store
- A command-line interface and an interactive browse mode
"""

from .config import Config
from .models import MediaType, Movie, TVSeries, MovieDetails, TVSeriesDetails, SavedItem
from .client import DataSource, TMDBClient, create_data_source
from .fixtures import FixtureClient
from .tmdb import TMDBApi
from .storage import KeyValueStore
from .lists import ListStorageService, ListType, migrate_legacy_watchlist
from .catalog import Catalog, PagedFeed, TrendingFeed
from .search import SearchSession
from .state import AppState, build_app_state
from .exceptions import TMDBError, StorageError

__version__ = "1.0.0"
__all__ = [
    "Config",
    "MediaType",
    "Movie",
    "TVSeries",
    "MovieDetails",
    "TVSeriesDetails",
    "SavedItem",
    "DataSource",
    "TMDBClient",
    "create_data_source",
    "FixtureClient",
    "TMDBApi",
    "KeyValueStore",
    "ListStorageService",
    "ListType",
    "migrate_legacy_watchlist",
    "Catalog",
    "PagedFeed",
    "TrendingFeed",
    "SearchSession",
    "AppState",
    "build_app_state",
    "TMDBError",
    "StorageError",
]
