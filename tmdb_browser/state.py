"""
Application state for TMDB Browser.

AppState is the composition root: it wires the data source, the API
wrapper, the key-value store, the four list services, the two catalogs
and the two search sessions. Surfaces (CLI, REST API) receive it by
reference; nothing in the package reaches for a global instance.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from sqlalchemy.engine import make_url

from .catalog import Catalog
from .client import DataSource, create_data_source
from .config import Config
from .lists import ListStorageService, ListType, migrate_legacy_watchlist
from .models import MediaType
from .search import SearchSession
from .storage import KeyValueStore
from .tmdb import TMDBApi
from .utils import setup_logger


@dataclass
class AppState:
    """Everything a view layer needs, built once at startup."""

    config: Config
    source: DataSource
    api: TMDBApi
    store: KeyValueStore
    lists: Dict[ListType, ListStorageService]
    catalogs: Dict[MediaType, Catalog]
    searches: Dict[MediaType, SearchSession] = field(default_factory=dict)

    def catalog(self, media_type: MediaType) -> Catalog:
        return self.catalogs[media_type]

    def search(self, media_type: MediaType) -> SearchSession:
        return self.searches[media_type]

    def favorites(self, media_type: MediaType) -> ListStorageService:
        return self.lists[ListType.lookup(media_type, "favorites")]

    def watchlist(self, media_type: MediaType) -> ListStorageService:
        return self.lists[ListType.lookup(media_type, "watchlist")]

    def list_service(self, media_type: MediaType, label: str) -> ListStorageService:
        """Service for 'favorites' or 'watchlist' of a media type."""
        return self.lists[ListType.lookup(media_type, label)]

    def list_counts(self) -> Dict[str, int]:
        return {list_type.key: service.count() for list_type, service in self.lists.items()}

    def migrate_legacy(self) -> int:
        """Move the legacy TV watchlist key into tv_watchlist. Raises StorageError."""
        return migrate_legacy_watchlist(self.store, self.lists[ListType.TV_WATCHLIST])

    def close(self) -> None:
        self.store.close()


def build_app_state(
    config: Config,
    source: Optional[DataSource] = None,
    store: Optional[KeyValueStore] = None,
) -> AppState:
    """
    Build the application state for a configuration.

    Args:
        config: Loaded configuration
        source: Data source override (defaults to create_data_source(config))
        store: Key-value store override (defaults to config.storage_url)

    Raises:
        ValueError: If no API key is configured and mock fallback is off
        StorageError: If the store cannot be opened
    """
    logger = setup_logger("state", config.log_dir)

    source = source or create_data_source(config)
    api = TMDBApi(source)
    store = store or KeyValueStore(config.storage_url, log_dir=config.log_dir)

    lists = {list_type: ListStorageService(store, list_type, log_dir=config.log_dir) for list_type in ListType}
    catalogs = {
        media_type: Catalog(api, media_type, max_workers=config.max_workers, log_dir=config.log_dir)
        for media_type in MediaType
    }
    searches = {media_type: SearchSession.for_media(api, media_type, log_dir=config.log_dir) for media_type in MediaType}

    storage = make_url(config.storage_url).render_as_string(hide_password=True)
    logger.info(f"App state ready (source={type(source).__name__}, storage={storage})")
    return AppState(
        config=config,
        source=source,
        api=api,
        store=store,
        lists=lists,
        catalogs=catalogs,
        searches=searches,
    )
