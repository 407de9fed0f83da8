"""
Key-value store for TMDB Browser.

A string-keyed JSON store on top of SQLAlchemy. Each value is one JSON
document in a single `kv_store` table:
- get/set/remove/has for one key
- multi-get / multi-set
- clear everything
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .exceptions import StorageError
from .utils import setup_logger, utc_now_iso


class KeyValueStore:
    """
    Handles all local persistence.

    Responsibilities:
    - Engine creation (SQLite file by default, any SQLAlchemy URL works)
    - Table bootstrap on first use
    - JSON encoding of values
    - Mapping driver errors to StorageError
    """

    TABLE = "kv_store"

    def __init__(self, url: str, log_dir=None, engine: Optional[Engine] = None):
        self.url = url
        self.engine = engine or self._create_engine()
        self.logger = setup_logger("storage", log_dir)
        self._ensure_table()

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine; in-memory SQLite shares one connection."""
        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            return create_engine(self.url, **kwargs)

        return create_engine(
            self.url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    def _ensure_table(self) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(text(f"""
                    CREATE TABLE IF NOT EXISTS {self.TABLE} (
                        item_key VARCHAR(255) NOT NULL PRIMARY KEY,
                        item_value TEXT NOT NULL,
                        updated_at VARCHAR(40) NOT NULL
                    )
                """))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create {self.TABLE} table: {e}") from e

    def _execute(self, query: str, params: dict = None) -> list:
        """Execute a query and return rows (empty list for writes)."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(query), params or {})
                return result.fetchall() if result.returns_rows else []
        except SQLAlchemyError as e:
            self.logger.error(f"Storage query failed: {e}")
            raise StorageError(f"Storage operation failed: {e}") from e

    @staticmethod
    def _decode(key: str, raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt JSON stored under {key!r}: {e}", key=key) from e

    @staticmethod
    def _encode(key: str, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serializable: {e}", key=key) from e

    # ============ SINGLE KEY ============

    def get_item(self, key: str) -> Any:
        """Return the decoded value for key, or None if absent."""
        rows = self._execute(
            f"SELECT item_value FROM {self.TABLE} WHERE item_key = :key",
            {"key": key},
        )
        return self._decode(key, rows[0][0]) if rows else None

    def set_item(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        self.set_multiple([(key, value)])

    def remove_item(self, key: str) -> None:
        self._execute(f"DELETE FROM {self.TABLE} WHERE item_key = :key", {"key": key})

    def has_item(self, key: str) -> bool:
        rows = self._execute(
            f"SELECT 1 FROM {self.TABLE} WHERE item_key = :key",
            {"key": key},
        )
        return len(rows) > 0

    # ============ MULTIPLE KEYS ============

    def get_all_keys(self) -> List[str]:
        rows = self._execute(f"SELECT item_key FROM {self.TABLE} ORDER BY item_key")
        return [row[0] for row in rows]

    def get_multiple(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return {key: value-or-None} for every requested key."""
        keys = list(keys)
        result: Dict[str, Any] = {key: None for key in keys}
        for key in keys:
            result[key] = self.get_item(key)
        return result

    def set_multiple(self, pairs: Iterable[Tuple[str, Any]]) -> None:
        """Write several key/value pairs in one transaction."""
        encoded = [(key, self._encode(key, value)) for key, value in pairs]
        now = utc_now_iso()
        try:
            with self.engine.begin() as conn:
                for key, raw in encoded:
                    conn.execute(
                        text(f"DELETE FROM {self.TABLE} WHERE item_key = :key"),
                        {"key": key},
                    )
                    conn.execute(
                        text(
                            f"INSERT INTO {self.TABLE} (item_key, item_value, updated_at) "
                            "VALUES (:key, :value, :updated_at)"
                        ),
                        {"key": key, "value": raw, "updated_at": now},
                    )
        except SQLAlchemyError as e:
            self.logger.error(f"Storage write failed: {e}")
            raise StorageError(f"Storage write failed: {e}") from e

    def clear(self) -> None:
        """Remove every key."""
        self._execute(f"DELETE FROM {self.TABLE}")
        self.logger.info("Key-value store cleared")

    def close(self) -> None:
        self.engine.dispose()
