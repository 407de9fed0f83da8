"""
Movie endpoints.
"""

from api.routers.catalog import create_catalog_router
from api.schemas.common import MovieCategory
from tmdb_browser.models import MediaType

router = create_catalog_router(MediaType.MOVIE, "movies", MovieCategory)
