"""
Named TMDB API wrappers.

Each method maps one domain intent ("popular movies, page 2") to an
endpoint string on the configured data source. Responses are the raw
decoded JSON; callers parse them with the models they expect.
"""

from typing import Optional

from .client import DataSource
from .models import MediaType

TIME_WINDOWS = ("day", "week")
RELATIONS = ("credits", "videos", "reviews", "similar", "recommendations")
PAGED_RELATIONS = ("reviews", "similar", "recommendations")

RELATED_METHODS = {
    MediaType.MOVIE: {
        "credits": "get_movie_credits",
        "videos": "get_movie_videos",
        "reviews": "get_movie_reviews",
        "similar": "get_similar_movies",
        "recommendations": "get_movie_recommendations",
    },
    MediaType.TV: {
        "credits": "get_tv_credits",
        "videos": "get_tv_videos",
        "reviews": "get_tv_reviews",
        "similar": "get_similar_tv",
        "recommendations": "get_tv_recommendations",
    },
}


def _check_time_window(time_window: str) -> str:
    if time_window not in TIME_WINDOWS:
        raise ValueError(f"time_window must be one of {TIME_WINDOWS}, got {time_window!r}")
    return time_window


class TMDBApi:
    """Thin intent-to-endpoint layer over a DataSource."""

    def __init__(self, source: DataSource):
        self.source = source

    def _get(self, endpoint: str, **params) -> dict:
        return self.source.get(endpoint, params or None)

    # ============ MOVIES ============

    def get_trending_movies(self, time_window: str = "week", page: int = 1) -> dict:
        return self._get(f"/trending/movie/{_check_time_window(time_window)}", page=page)

    def get_popular_movies(self, page: int = 1) -> dict:
        return self._get("/movie/popular", page=page)

    def get_top_rated_movies(self, page: int = 1) -> dict:
        return self._get("/movie/top_rated", page=page)

    def get_now_playing_movies(self, page: int = 1) -> dict:
        return self._get("/movie/now_playing", page=page)

    def get_upcoming_movies(self, page: int = 1) -> dict:
        return self._get("/movie/upcoming", page=page)

    def search_movies(self, query: str, page: int = 1) -> dict:
        """Search movies by title. The query is sent as-is, even when empty."""
        return self._get("/search/movie", query=query, page=page)

    def get_movie_details(self, movie_id: int) -> dict:
        return self._get(f"/movie/{movie_id}")

    def get_movie_credits(self, movie_id: int) -> dict:
        return self._get(f"/movie/{movie_id}/credits")

    def get_movie_videos(self, movie_id: int) -> dict:
        return self._get(f"/movie/{movie_id}/videos")

    def get_movie_reviews(self, movie_id: int, page: int = 1) -> dict:
        return self._get(f"/movie/{movie_id}/reviews", page=page)

    def get_similar_movies(self, movie_id: int, page: int = 1) -> dict:
        return self._get(f"/movie/{movie_id}/similar", page=page)

    def get_movie_recommendations(self, movie_id: int, page: int = 1) -> dict:
        return self._get(f"/movie/{movie_id}/recommendations", page=page)

    # ============ TV ============

    def get_trending_tv(self, time_window: str = "week", page: int = 1) -> dict:
        return self._get(f"/trending/tv/{_check_time_window(time_window)}", page=page)

    def get_popular_tv(self, page: int = 1) -> dict:
        return self._get("/tv/popular", page=page)

    def get_top_rated_tv(self, page: int = 1) -> dict:
        return self._get("/tv/top_rated", page=page)

    def get_on_the_air_tv(self, page: int = 1) -> dict:
        return self._get("/tv/on_the_air", page=page)

    def get_airing_today_tv(self, page: int = 1) -> dict:
        return self._get("/tv/airing_today", page=page)

    def search_tv(self, query: str, page: int = 1) -> dict:
        return self._get("/search/tv", query=query, page=page)

    def get_tv_details(self, tv_id: int) -> dict:
        return self._get(f"/tv/{tv_id}")

    def get_tv_credits(self, tv_id: int) -> dict:
        return self._get(f"/tv/{tv_id}/credits")

    def get_tv_videos(self, tv_id: int) -> dict:
        return self._get(f"/tv/{tv_id}/videos")

    def get_tv_reviews(self, tv_id: int, page: int = 1) -> dict:
        return self._get(f"/tv/{tv_id}/reviews", page=page)

    def get_similar_tv(self, tv_id: int, page: int = 1) -> dict:
        return self._get(f"/tv/{tv_id}/similar", page=page)

    def get_tv_recommendations(self, tv_id: int, page: int = 1) -> dict:
        return self._get(f"/tv/{tv_id}/recommendations", page=page)

    def get_season_details(self, tv_id: int, season_number: int) -> dict:
        return self._get(f"/tv/{tv_id}/season/{season_number}")

    def get_episode_details(self, tv_id: int, season_number: int, episode_number: int) -> dict:
        return self._get(f"/tv/{tv_id}/season/{season_number}/episode/{episode_number}")

    # ============ MEDIA-TYPE DISPATCH ============

    def get_trending(self, media_type: MediaType, time_window: str = "week", page: int = 1) -> dict:
        if media_type == MediaType.MOVIE:
            return self.get_trending_movies(time_window, page)
        return self.get_trending_tv(time_window, page)

    def search(self, media_type: MediaType, query: str, page: int = 1) -> dict:
        if media_type == MediaType.MOVIE:
            return self.search_movies(query, page)
        return self.search_tv(query, page)

    def get_details(self, media_type: MediaType, item_id: int) -> dict:
        if media_type == MediaType.MOVIE:
            return self.get_movie_details(item_id)
        return self.get_tv_details(item_id)

    def get_related(self, media_type: MediaType, item_id: int, relation: str, page: Optional[int] = None) -> dict:
        """
        Fetch a details sub-resource.

        Args:
            media_type: movie or tv
            item_id: TMDB id
            relation: credits, videos, reviews, similar or recommendations
            page: Page for the paged relations (reviews, similar, recommendations)
        """
        if relation not in RELATIONS:
            raise ValueError(f"Unknown relation: {relation}")
        method = getattr(self, RELATED_METHODS[media_type][relation])
        if page is not None and relation in PAGED_RELATIONS:
            return method(item_id, page)
        return method(item_id)
