"""
TMDB API client.

One GET primitive shared by every named wrapper in tmdb.py:
- Appends the API key (and language) to the query string
- Raises TMDBError on any non-2xx status, carrying status and body text
- Returns the decoded JSON body untouched

No retry, backoff or response caching happens at this layer.
"""

from typing import Optional, Protocol

import requests

from .config import Config
from .exceptions import TMDBError
from .utils import setup_logger


class DataSource(Protocol):
    """Anything that can answer a TMDB endpoint with a decoded JSON body."""

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        ...

    def test_connection(self) -> bool:
        ...


class TMDBClient:
    """
    Live HTTP data source.

    Responsibilities:
    - Session and default header management
    - API key / language query parameters
    - Mapping HTTP failures to TMDBError
    """

    REQUEST_TIMEOUT = 30  # seconds

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        if not config.api_key:
            raise ValueError("TMDB_API_KEY environment variable is required")
        self.config = config
        self.session = session or self._create_session()
        self.logger = setup_logger("tmdb_client", config.log_dir)

    def _create_session(self) -> requests.Session:
        """Create requests session with default headers."""
        session = requests.Session()
        session.headers.update(self.config.get_headers())
        return session

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """
        Make one GET request against the API.

        Args:
            endpoint: API endpoint (e.g., '/movie/popular')
            params: Query parameters (page, query, ...)

        Returns:
            Decoded JSON response

        Raises:
            TMDBError: On non-2xx status or transport failure
        """
        url = f"{self.config.base_url}{endpoint}"
        query = dict(params or {})
        query["api_key"] = self.config.api_key
        query.setdefault("language", self.config.language)

        self.logger.debug(f"GET {endpoint} params={params or {}}")

        try:
            response = self.session.get(url, params=query, timeout=self.REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Request error for {endpoint}: {e}")
            raise TMDBError(f"Request failed: {e}") from e

        if not response.ok:
            self.logger.warning(f"API error ({response.status_code}) for {endpoint}")
            raise TMDBError.from_response(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON from {endpoint}: {e}")
            raise TMDBError(f"Invalid JSON response from {endpoint}", response.status_code) from e

    def test_connection(self) -> bool:
        """Test API connection by fetching a known movie."""
        try:
            data = self.get("/movie/550")  # Fight Club
            return "title" in data
        except TMDBError as e:
            self.logger.error(f"API connection test failed: {e}")
            return False


def create_data_source(config: Config) -> DataSource:
    """
    Pick the data source for this configuration.

    - USE_MOCK_DATA=true: always the fixture client
    - API key present: the live client
    - no API key: fixture client if MOCK_FALLBACK is on, else ValueError
    """
    from .fixtures import FixtureClient

    logger = setup_logger("tmdb_client", config.log_dir)

    if config.use_mock_data:
        logger.info("Using fixture data source (USE_MOCK_DATA)")
        return FixtureClient()

    if config.has_api_key:
        return TMDBClient(config)

    if config.mock_fallback:
        logger.warning("TMDB API key not configured, falling back to fixture data")
        return FixtureClient()

    raise ValueError("TMDB_API_KEY environment variable is required")
