"""
TMDB Browser REST API.

FastAPI application exposing the catalogs, details pages and search of
the browser, plus the local favorites and watchlist lists.
"""

from api.main import app

__all__ = ["app"]
