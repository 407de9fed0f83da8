"""
Shared fixtures for TMDB Browser tests.

Provides a recording fake data source, sample TMDB payloads, an in-memory
key-value store, and an API client with overridden dependencies.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from tmdb_browser.config import Config
from tmdb_browser.exceptions import TMDBError
from tmdb_browser.state import build_app_state
from tmdb_browser.storage import KeyValueStore


# =============================================================================
# SAMPLE DATA
# =============================================================================

def create_sample_movie(movie_id: int, title: Optional[str] = None, **overrides) -> dict:
    """Create a TMDB movie list entry."""
    movie = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "original_title": title or f"Movie {movie_id}",
        "overview": f"This is the overview for movie {movie_id}.",
        "poster_path": f"/poster_{movie_id}.jpg",
        "backdrop_path": f"/backdrop_{movie_id}.jpg",
        "release_date": "2010-07-16",
        "vote_average": 7.5,
        "vote_count": 1000,
        "adult": False,
        "genre_ids": [28, 18],
        "original_language": "en",
        "popularity": 50.0,
        "video": False,
    }
    movie.update(overrides)
    return movie


def create_sample_series(series_id: int, name: Optional[str] = None, **overrides) -> dict:
    """Create a TMDB TV list entry."""
    series = {
        "id": series_id,
        "name": name or f"Series {series_id}",
        "original_name": name or f"Series {series_id}",
        "overview": f"This is the overview for series {series_id}.",
        "poster_path": f"/tv_poster_{series_id}.jpg",
        "backdrop_path": None,
        "first_air_date": "2015-01-01",
        "vote_average": 8.0,
        "vote_count": 500,
        "genre_ids": [18],
        "original_language": "en",
        "popularity": 30.0,
        "origin_country": ["US"],
    }
    series.update(overrides)
    return series


def sample_page(page: int, total_pages: int = 10, per_page: int = 20, factory=create_sample_movie) -> dict:
    """One TMDB list page with unique ids per page."""
    return {
        "page": page,
        "results": [factory(page * 1000 + i) for i in range(per_page)],
        "total_pages": total_pages,
        "total_results": total_pages * per_page,
    }


def sample_movie_details(movie_id: int = 550, title: str = "Fight Club") -> dict:
    return {
        **create_sample_movie(movie_id, title),
        "genres": [{"id": 18, "name": "Drama"}],
        "runtime": 139,
        "budget": 63000000,
        "revenue": 100853753,
        "imdb_id": "tt0137523",
        "status": "Released",
        "tagline": "Mischief. Mayhem. Soap.",
        "production_companies": [{"id": 508, "name": "Regency Enterprises"}],
        "spoken_languages": [{"english_name": "English", "iso_639_1": "en"}],
    }


# =============================================================================
# FAKE DATA SOURCE
# =============================================================================

Response = Union[dict, Exception, Callable[[dict], dict]]


class FakeDataSource:
    """
    Data source answering from a route table and recording every call.

    Each route maps an endpoint to a dict, an exception to raise, or a
    callable taking the request params. Unknown endpoints answer 404.
    Calls for `block_page` wait until `release` is set.
    """

    def __init__(self, routes: Optional[Dict[str, Response]] = None):
        self.routes: Dict[str, Response] = dict(routes or {})
        self.calls: List[tuple] = []
        self.block_page: Optional[int] = None
        self.started = threading.Event()
        self.release = threading.Event()
        self._lock = threading.Lock()

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        params = dict(params or {})
        with self._lock:
            self.calls.append((endpoint, params))

        if self.block_page is not None and params.get("page") == self.block_page:
            self.started.set()
            self.release.wait(timeout=5)

        response = self.routes.get(endpoint)
        if response is None:
            raise TMDBError.from_response(404, "The resource you requested could not be found.")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def test_connection(self) -> bool:
        return "/movie/550" in self.routes

    def calls_to(self, endpoint: str) -> List[dict]:
        """Params of every call made to endpoint."""
        return [params for called, params in self.calls if called == endpoint]


class FakeClock:
    """Strictly increasing ISO timestamps, one second apart."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> str:
        self.now += timedelta(seconds=1)
        return self.now.isoformat()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def fake_source():
    """Fake source with paged movie/TV categories, details and search."""
    return FakeDataSource({
        "/movie/popular": lambda params: sample_page(params.get("page", 1)),
        "/movie/top_rated": lambda params: sample_page(params.get("page", 1), total_pages=2),
        "/movie/now_playing": lambda params: sample_page(params.get("page", 1), total_pages=1),
        "/movie/upcoming": lambda params: sample_page(params.get("page", 1), total_pages=1),
        "/trending/movie/week": sample_page(1, total_pages=1, per_page=5),
        "/trending/movie/day": sample_page(1, total_pages=1, per_page=3),
        "/tv/popular": lambda params: sample_page(params.get("page", 1), factory=create_sample_series),
        "/movie/550": sample_movie_details(),
        "/movie/550/credits": {
            "id": 550,
            "cast": [{"id": 819, "name": "Edward Norton", "character": "The Narrator", "order": 0}],
            "crew": [{"id": 7467, "name": "David Fincher", "job": "Director", "department": "Directing"}],
        },
        "/movie/550/videos": {
            "id": 550,
            "results": [
                {"id": "a", "key": "teaser", "name": "Teaser", "site": "YouTube", "type": "Teaser"},
                {"id": "b", "key": "SUXWAEX2jlg", "name": "Trailer", "site": "YouTube", "type": "Trailer"},
            ],
        },
        "/movie/550/similar": sample_page(1, total_pages=1, per_page=3),
        "/movie/550/recommendations": sample_page(1, total_pages=1, per_page=2),
        "/search/movie": lambda params: sample_page(params.get("page", 1), total_pages=3, per_page=4),
        "/search/tv": lambda params: sample_page(
            params.get("page", 1), total_pages=1, per_page=2, factory=create_sample_series
        ),
    })


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    """Fresh in-memory key-value store."""
    kv = KeyValueStore("sqlite://", log_dir=tmp_path / "logs")
    yield kv
    kv.close()


@pytest.fixture
def config(tmp_path):
    return Config(
        project_dir=tmp_path,
        log_dir=tmp_path / "logs",
        storage_url="sqlite://",
        use_mock_data=True,
        max_workers=4,
    )


@pytest.fixture
def app_state(config, fake_source, store):
    """Application state wired to the fake source and in-memory store."""
    return build_app_state(config, source=fake_source, store=store)


@pytest.fixture
def api_client(app_state, config):
    """Provide FastAPI test client with overridden dependencies."""
    from api.main import app
    from api import dependencies

    dependencies.get_config.cache_clear()
    dependencies.get_state.cache_clear()

    app.dependency_overrides[dependencies.get_state] = lambda: app_state
    app.dependency_overrides[dependencies.get_config] = lambda: config

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
