"""
Configuration management for TMDB Browser.

Loads configuration from environment variables and provides
a centralized Config dataclass for all settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import make_url

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


def mysql_url(user: str, password: str, host: str, port: int, name: str) -> str:
    """Get SQLAlchemy URL for a MySQL list store."""
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Centralized configuration from environment variables."""

    # TMDB API
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    language: str = "en-US"

    # Data source selection
    use_mock_data: bool = False
    mock_fallback: bool = True  # Serve fixtures when no API key is set

    # Local list storage (SQLAlchemy URL)
    storage_url: str = ""

    # Concurrent "wait for all" fetches
    max_workers: int = 5

    # Paths
    project_dir: Path = field(default_factory=Path.cwd)
    log_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # CORS settings
    allowed_origins: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.storage_url:
            self.storage_url = f"sqlite:///{self.project_dir / 'tmdb_browser.db'}"

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_path: Optional path to .env file. If not provided,
                     looks for .env in the current directory.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        # The mobile app read its key from EXPO_PUBLIC_TMDB_API_KEY
        api_key = (
            os.getenv("TMDB_API_KEY")
            or os.getenv("EXPO_PUBLIC_TMDB_API_KEY")
            or os.getenv("API_KEY")
            or None
        )

        base_url = os.getenv("BASE_URL", DEFAULT_BASE_URL).rstrip("/")
        language = os.getenv("TMDB_LANGUAGE", "en-US")
        project_dir = Path(os.getenv("PROJECT_DIR", Path.cwd()))
        storage_url = os.getenv("STORAGE_URL", "")

        try:
            max_workers = int(os.getenv("MAX_WORKERS", "5"))
            api_port = int(os.getenv("API_PORT", "8000"))
            db_port = int(os.getenv("SQL_PORT", "3306"))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting: {e}") from e

        # Shared MySQL server instead of the local SQLite file
        db_user = os.getenv("SQL_USER", "")
        db_name = os.getenv("SQL_DB", "")
        if not storage_url and db_user and db_name:
            storage_url = mysql_url(
                db_user,
                os.getenv("SQL_PASS", ""),
                os.getenv("SQL_HOST", "localhost"),
                db_port,
                db_name,
            )

        origins_str = os.getenv("ALLOWED_ORIGINS", "")
        allowed_origins = [o.strip() for o in origins_str.split(",") if o.strip()]

        return cls(
            api_key=api_key,
            base_url=base_url,
            language=language,
            use_mock_data=_env_flag("USE_MOCK_DATA"),
            mock_fallback=_env_flag("MOCK_FALLBACK", "true"),
            storage_url=storage_url,
            max_workers=max(1, max_workers),
            project_dir=project_dir,
            log_dir=project_dir / "logs",
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=api_port,
            api_debug=_env_flag("API_DEBUG"),
            allowed_origins=allowed_origins,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def get_headers(self) -> dict:
        """Get headers for TMDB API requests."""
        return {
            "Accept": "application/json",
        }

    def summary(self) -> dict:
        """Non-secret settings for status output."""
        return {
            "Base URL": self.base_url,
            "Language": self.language,
            "API key": "configured" if self.has_api_key else "missing",
            "Mock data": "on" if self.use_mock_data else "off",
            "Mock fallback": "on" if self.mock_fallback else "off",
            "Storage": make_url(self.storage_url).render_as_string(hide_password=True),
            "Log dir": str(self.log_dir),
        }
