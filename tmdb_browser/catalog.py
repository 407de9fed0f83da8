"""
Catalog state for TMDB Browser.

In-memory, accumulate-and-append views over the TMDB list endpoints:
- PagedFeed: one category (popular, top_rated, ...), page 1 replaces, later pages append
- TrendingFeed: trending for a time window, always replaces
- DetailsState: one selected details record (movie/series details, a season)
- Catalog: all of the above for one media type, plus concurrent "wait for all" loads

Network calls run outside the state lock; only the request token handout
and the final state update are locked. A newer request always goes out and
its response wins; only load_more is refused while a fetch is pending.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .exceptions import TMDBError
from .models import (
    Credits,
    MediaType,
    PagedResult,
    Review,
    Season,
    Video,
    details_parser,
    find_trailer,
    record_parser,
)
from .tmdb import TMDBApi
from .utils import setup_logger

CATEGORIES: Dict[MediaType, Dict[str, str]] = {
    MediaType.MOVIE: {
        "popular": "get_popular_movies",
        "top_rated": "get_top_rated_movies",
        "now_playing": "get_now_playing_movies",
        "upcoming": "get_upcoming_movies",
    },
    MediaType.TV: {
        "popular": "get_popular_tv",
        "top_rated": "get_top_rated_tv",
        "on_the_air": "get_on_the_air_tv",
        "airing_today": "get_airing_today_tv",
    },
}


class LoadState:
    """
    Loading flag and error message shared by every view state.

    Each request takes a token. Only the newest request may apply its
    result; an older response that lands later is dropped.
    """

    def __init__(self, name: str, logger=None):
        self.name = name
        self.loading = False
        self.error: Optional[str] = None
        self._lock = threading.Lock()
        self._generation = 0
        self.logger = logger or logging.getLogger("tmdb_browser.catalog")

    def _begin(self, exclusive: bool = False) -> Optional[int]:
        """
        Start a request and return its token.

        With exclusive=True the request is refused (None) while another
        one is pending.
        """
        with self._lock:
            if exclusive and self.loading:
                self.logger.debug(f"{self.name}: fetch already pending, ignoring")
                return None
            self._generation += 1
            self.loading = True
            self.error = None
            return self._generation

    def _superseded(self, token: int) -> bool:
        """Caller holds the lock."""
        if token != self._generation:
            self.logger.debug(f"{self.name}: dropping response of superseded request")
            return True
        return False

    def _fail(self, token: int, error: Exception) -> None:
        with self._lock:
            if self._superseded(token):
                return
            self.error = str(error)
            self.loading = False
        self.logger.warning(f"{self.name}: {error}")

    def _abort(self, token: int) -> None:
        with self._lock:
            if token == self._generation:
                self.loading = False


class PagedFeed(LoadState):
    """
    Accumulated result list for one category.

    fetch(1) replaces the list, fetch(n > 1) appends. On failure the list
    and the page counter stay as they were and the message lands in `error`.
    """

    def __init__(self, name: str, fetch_page: Callable[[int], dict], parse: Callable, logger=None):
        super().__init__(name, logger)
        self.fetch_page = fetch_page
        self.parse = parse
        self.items: list = []
        self.page = 1
        self.total_pages = 0
        self.total_results = 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages

    def fetch(self, page: int = 1) -> bool:
        """
        Fetch one page. Always issues the request.

        Returns:
            True if the page was applied, False if it failed or a newer
            request superseded it
        """
        return self._fetch(page, self._begin())

    def load_more(self) -> bool:
        """Fetch the next page. No-op while a fetch is pending."""
        token = self._begin(exclusive=True)
        if token is None:
            return False
        return self._fetch(self.page + 1, token)

    def _fetch(self, page: int, token: int) -> bool:
        try:
            result = PagedResult.from_tmdb(self.fetch_page(page), self.parse)
        except TMDBError as e:
            self._fail(token, e)
            return False
        except Exception:
            self._abort(token)
            raise

        with self._lock:
            if self._superseded(token):
                return False
            self.items = list(result.results) if page == 1 else self.items + result.results
            self.page = page
            self.total_pages = result.total_pages
            self.total_results = result.total_results
            self.loading = False
        return True


class TrendingFeed(LoadState):
    """Trending list for a 'day' or 'week' window. No load-more."""

    def __init__(self, name: str, fetch_window: Callable[[str], dict], parse: Callable, logger=None):
        super().__init__(name, logger)
        self.fetch_window = fetch_window
        self.parse = parse
        self.items: list = []
        self.time_window = "week"

    def fetch(self, time_window: str = "week") -> bool:
        token = self._begin()
        try:
            result = PagedResult.from_tmdb(self.fetch_window(time_window), self.parse)
        except TMDBError as e:
            self._fail(token, e)
            return False
        except Exception:
            self._abort(token)
            raise

        with self._lock:
            if self._superseded(token):
                return False
            self.items = list(result.results)
            self.time_window = time_window
            self.loading = False
        return True


class DetailsState(LoadState):
    """The currently selected details record."""

    def __init__(self, name: str, loader: Callable[..., dict], parse: Callable, logger=None):
        super().__init__(name, logger)
        self.loader = loader
        self.parse = parse
        self.selected = None

    def load(self, *args):
        """Fetch a record and select it. Returns it, or None on failure."""
        token = self._begin()
        try:
            selected = self.parse(self.loader(*args))
        except TMDBError as e:
            self._fail(token, e)
            return None
        except Exception:
            self._abort(token)
            raise
        self._select(token, selected)
        return selected

    def _select(self, token: int, selected) -> None:
        with self._lock:
            if self._superseded(token):
                return
            self.selected = selected
            self.loading = False

    def clear(self) -> None:
        with self._lock:
            self.selected = None
            self.error = None


@dataclass
class DetailsPage:
    """Everything a details view shows for one title."""

    media_type: MediaType
    details: object
    credits: Credits
    videos: List[Video] = field(default_factory=list)
    similar: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)

    @property
    def trailer(self) -> Optional[Video]:
        return find_trailer(self.videos)


class Catalog:
    """
    Catalog state for one media type.

    Holds the category feeds, the trending feed, the details state and,
    for TV, the season state.
    """

    def __init__(self, api: TMDBApi, media_type: MediaType, max_workers: int = 5, log_dir=None):
        self.api = api
        self.media_type = media_type
        self.max_workers = max_workers
        self.logger = setup_logger(f"catalog.{media_type.value}", log_dir)

        parse = record_parser(media_type)
        self.feeds: Dict[str, PagedFeed] = {
            category: PagedFeed(f"{media_type.value}/{category}", getattr(api, method), parse, self.logger)
            for category, method in CATEGORIES[media_type].items()
        }
        self.trending = TrendingFeed(
            f"{media_type.value}/trending",
            lambda window: api.get_trending(media_type, window),
            parse,
            self.logger,
        )
        self.details = DetailsState(
            f"{media_type.value}/details",
            lambda item_id: api.get_details(media_type, item_id),
            details_parser(media_type),
            self.logger,
        )
        self.season: Optional[DetailsState] = None
        if media_type == MediaType.TV:
            self.season = DetailsState("tv/season", api.get_season_details, Season.from_tmdb, self.logger)

    @property
    def categories(self) -> List[str]:
        return list(self.feeds)

    def feed(self, category: str) -> PagedFeed:
        if category not in self.feeds:
            raise ValueError(
                f"Unknown {self.media_type.value} category: {category} "
                f"(choose from {', '.join(self.feeds)})"
            )
        return self.feeds[category]

    def refresh(self, time_window: str = "week") -> Dict[str, Optional[str]]:
        """
        Fetch page 1 of every category plus trending, concurrently.

        Waits for all fetches to settle. Each feed keeps its own error.

        Returns:
            {feed name: error message or None}
        """
        states = list(self.feeds.values()) + [self.trending]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(feed.fetch, 1) for feed in self.feeds.values()]
            futures.append(pool.submit(self.trending.fetch, time_window))
        for future in futures:
            future.result()

        errors = {state.name: state.error for state in states}
        failed = [name for name, error in errors.items() if error]
        if failed:
            self.logger.warning(f"Refresh finished with {len(failed)} failed feed(s): {', '.join(failed)}")
        else:
            self.logger.info(f"Refreshed {len(states)} {self.media_type.value} feeds")
        return errors

    def _settled(self, future: Future, relation: str, parse: Callable, default):
        try:
            return parse(future.result())
        except TMDBError as e:
            self.logger.warning(f"{self.media_type.value} {relation} unavailable: {e}")
            return default

    def load_details_page(self, item_id: int) -> Optional[DetailsPage]:
        """
        Fetch details, credits, videos, similar and recommendations concurrently.

        A failed details call is recorded on `self.details.error` and None is
        returned; the feeds are not touched. A failed secondary call only
        leaves that section empty.
        """
        token = self.details._begin()
        media_type = self.media_type
        api = self.api
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            details_future = pool.submit(api.get_details, media_type, item_id)
            related = {
                relation: pool.submit(api.get_related, media_type, item_id, relation)
                for relation in ("credits", "videos", "similar", "recommendations")
            }

        try:
            details = self.details.parse(details_future.result())
        except TMDBError as e:
            self.details._fail(token, e)
            return None
        except Exception:
            self.details._abort(token)
            raise
        self.details._select(token, details)

        parse = record_parser(media_type)
        return DetailsPage(
            media_type=media_type,
            details=details,
            credits=self._settled(related["credits"], "credits", Credits.from_tmdb, Credits(id=item_id)),
            videos=self._settled(
                related["videos"],
                "videos",
                lambda data: [Video.from_tmdb(v) for v in data.get("results") or []],
                [],
            ),
            similar=self._settled(
                related["similar"], "similar", lambda data: PagedResult.from_tmdb(data, parse).results, []
            ),
            recommendations=self._settled(
                related["recommendations"],
                "recommendations",
                lambda data: PagedResult.from_tmdb(data, parse).results,
                [],
            ),
        )

    def load_reviews(self, item_id: int, page: int = 1) -> PagedResult:
        """Fetch one page of reviews. Raises TMDBError."""
        data = self.api.get_related(self.media_type, item_id, "reviews", page)
        return PagedResult.from_tmdb(data, Review.from_tmdb)

    def load_season(self, tv_id: int, season_number: int) -> Optional[Season]:
        """Fetch a season with its episodes (TV only)."""
        if self.season is None:
            raise ValueError("Seasons exist only for TV series")
        return self.season.load(tv_id, season_number)
