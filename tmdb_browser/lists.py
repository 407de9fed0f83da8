"""
Favorites / watchlist storage for TMDB Browser.

One generic service handles all four lists. Each list is a single JSON
document in the key-value store:

    {"movies": {"550": {...record, "addedAt": "<ISO>"}}, "lastUpdated": "<ISO>"}

TV lists use "tvSeries" instead of "movies". By default storage failures
are logged, recorded on `last_error` and turned into False / [] / 0; with
raise_errors=True the StorageError reaches the caller instead.
"""

import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, List, Optional, Union

from .exceptions import StorageError
from .models import MediaType, Record, SavedItem
from .storage import KeyValueStore
from .utils import parse_timestamp, setup_logger, utc_now_iso

LEGACY_WATCHLIST_KEY = "watchlist"


class ListType(Enum):
    """Reserved storage key, content type and document field of each list."""

    MOVIE_FAVORITES = ("favorites", MediaType.MOVIE, "movies")
    MOVIE_WATCHLIST = ("movie_watchlist", MediaType.MOVIE, "movies")
    TV_FAVORITES = ("tv_favorites", MediaType.TV, "tvSeries")
    TV_WATCHLIST = ("tv_watchlist", MediaType.TV, "tvSeries")

    def __init__(self, key: str, media_type: MediaType, field: str):
        self.key = key
        self.media_type = media_type
        self.field = field

    @property
    def label(self) -> str:
        """'favorites' or 'watchlist'."""
        return "favorites" if self.name.endswith("FAVORITES") else "watchlist"

    @classmethod
    def lookup(cls, media_type: MediaType, label: str) -> "ListType":
        for list_type in cls:
            if list_type.media_type == media_type and list_type.label == label:
                return list_type
        raise ValueError(f"Unknown list: {media_type.value}/{label}")


def _record_dict(record: Union[Record, dict]) -> dict:
    data = record if isinstance(record, dict) else record.to_dict()
    if data.get("id") is None:
        raise ValueError("Record has no id")
    return {k: v for k, v in data.items() if k != "addedAt"}


class ListStorageService:
    """
    Membership list for one ListType.

    Every read-modify-write of the document runs under a per-service lock,
    so add/remove/toggle from several threads never lose an update.
    """

    def __init__(
        self,
        store: KeyValueStore,
        list_type: ListType,
        clock: Optional[Callable[[], str]] = None,
        log_dir=None,
    ):
        self.store = store
        self.list_type = list_type
        self.clock = clock or utc_now_iso
        self.last_error: Optional[str] = None
        self._lock = threading.RLock()
        self.logger = setup_logger("lists", log_dir)

    @property
    def key(self) -> str:
        return self.list_type.key

    @property
    def media_type(self) -> MediaType:
        return self.list_type.media_type

    # ============ DOCUMENT I/O ============

    def _load(self) -> dict:
        """Return the id -> entry map. Raises StorageError."""
        document = self.store.get_item(self.key)
        if document is None:
            return {}
        if not isinstance(document, dict) or not isinstance(document.get(self.list_type.field, {}), dict):
            raise StorageError(f"Malformed list document under {self.key!r}", key=self.key)
        return dict(document.get(self.list_type.field, {}))

    def _save(self, entries: dict) -> None:
        self.store.set_item(self.key, {self.list_type.field: entries, "lastUpdated": self.clock()})

    def _failed(self, action: str, error: StorageError, raise_errors: bool = False) -> None:
        self.last_error = f"{action} failed: {error}"
        self.logger.error(f"{self.key}: {self.last_error}")
        if raise_errors:
            raise error

    def _ok(self) -> None:
        self.last_error = None

    # ============ OPERATIONS ============
    # raise_errors=True re-raises the StorageError instead of returning the
    # fallback value. `last_error` is shared by every caller of the service.

    def add(self, record: Union[Record, dict], raise_errors: bool = False) -> bool:
        """
        Insert or overwrite the entry for record.id.

        addedAt is stamped with the current time even when the id was
        already present, so a re-add moves the entry to the front.
        """
        data = _record_dict(record)
        with self._lock:
            try:
                entries = self._load()
                entries[str(data["id"])] = {**data, "addedAt": self.clock()}
                self._save(entries)
            except StorageError as e:
                self._failed("add", e, raise_errors)
                return False
        self._ok()
        self.logger.info(f"{self.key}: added {data['id']}")
        return True

    def remove(self, item_id: int, raise_errors: bool = False) -> bool:
        """Delete the entry if present. Removing an absent id succeeds."""
        with self._lock:
            try:
                entries = self._load()
                if entries.pop(str(item_id), None) is not None:
                    self._save(entries)
                    self.logger.info(f"{self.key}: removed {item_id}")
            except StorageError as e:
                self._failed("remove", e, raise_errors)
                return False
        self._ok()
        return True

    def toggle(self, record: Union[Record, dict], raise_errors: bool = False) -> bool:
        """Flip membership of record.id and return the new membership."""
        data = _record_dict(record)
        key = str(data["id"])
        with self._lock:
            try:
                entries = self._load()
                member = key not in entries
                if member:
                    entries[key] = {**data, "addedAt": self.clock()}
                else:
                    del entries[key]
                self._save(entries)
            except StorageError as e:
                self._failed("toggle", e, raise_errors)
                return False
        self._ok()
        self.logger.info(f"{self.key}: {'added' if member else 'removed'} {data['id']}")
        return member

    def is_member(self, item_id: int, raise_errors: bool = False) -> bool:
        try:
            member = str(item_id) in self._load()
        except StorageError as e:
            self._failed("is_member", e, raise_errors)
            return False
        self._ok()
        return member

    def get(self, item_id: int, raise_errors: bool = False) -> Optional[SavedItem]:
        """Return one saved entry or None."""
        try:
            data = self._load().get(str(item_id))
        except StorageError as e:
            self._failed("get", e, raise_errors)
            return None
        self._ok()
        return SavedItem.from_document(self.media_type, data) if data else None

    def list_all(self, raise_errors: bool = False) -> List[SavedItem]:
        """All entries, newest addedAt first."""
        try:
            entries = self._load()
        except StorageError as e:
            self._failed("list_all", e, raise_errors)
            return []
        self._ok()
        ordered = sorted(
            entries.values(),
            key=lambda entry: parse_timestamp(entry.get("addedAt")),
            reverse=True,
        )
        return [SavedItem.from_document(self.media_type, entry) for entry in ordered]

    def get_ids(self, raise_errors: bool = False) -> List[int]:
        return [item.id for item in self.list_all(raise_errors)]

    def count(self, raise_errors: bool = False) -> int:
        try:
            total = len(self._load())
        except StorageError as e:
            self._failed("count", e, raise_errors)
            return 0
        self._ok()
        return total

    def clear_all(self, raise_errors: bool = False) -> bool:
        """Empty the list. The document stays, with an empty map and a fresh lastUpdated."""
        with self._lock:
            try:
                self._save({})
            except StorageError as e:
                self._failed("clear_all", e, raise_errors)
                return False
        self._ok()
        self.logger.info(f"{self.key}: cleared")
        return True

    def get_document(self, raise_errors: bool = False) -> dict:
        """The stored document as-is (empty map when nothing is stored)."""
        try:
            document = self.store.get_item(self.key)
        except StorageError as e:
            self._failed("get_document", e, raise_errors)
            document = None
        else:
            self._ok()
        return document or {self.list_type.field: {}, "lastUpdated": None}

    def merge_entries(self, entries: Iterable[dict]) -> int:
        """
        Insert entries that are not already present, keeping their addedAt.

        Returns the number of entries added. Raises StorageError.
        """
        added = 0
        with self._lock:
            current = self._load()
            for entry in entries:
                key = str(entry["id"])
                if key not in current:
                    current[key] = entry
                    added += 1
            if added:
                self._save(current)
        return added


def _legacy_added_at(value) -> str:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
    return value or utc_now_iso()


def migrate_legacy_watchlist(store: KeyValueStore, target: ListStorageService) -> int:
    """
    Move the legacy `watchlist` array into the target list.

    Legacy entries carry addedAt in epoch milliseconds; they are converted
    to ISO strings. Ids already in the target are kept as they are. The
    legacy key is removed afterwards. Returns the number of entries moved.

    Raises:
        StorageError: If the store fails or the legacy value is not a list
    """
    legacy = store.get_item(LEGACY_WATCHLIST_KEY)
    if legacy is None:
        return 0
    if not isinstance(legacy, list):
        raise StorageError(f"Legacy {LEGACY_WATCHLIST_KEY!r} value is not a list", key=LEGACY_WATCHLIST_KEY)

    entries = [
        {**entry, "addedAt": _legacy_added_at(entry.get("addedAt"))}
        for entry in legacy
        if isinstance(entry, dict) and entry.get("id") is not None
    ]
    moved = target.merge_entries(entries)
    store.remove_item(LEGACY_WATCHLIST_KEY)
    target.logger.info(f"Migrated {moved} legacy watchlist entries into {target.key}")
    return moved
