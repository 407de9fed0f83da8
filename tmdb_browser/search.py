"""
Search sessions for TMDB Browser.

A SearchSession tracks one free-text query over either movies or TV series:
the accumulated results, the page counter and the totals reported by TMDB.
"""

from typing import Callable

from .catalog import LoadState
from .exceptions import TMDBError
from .models import MediaType, PagedResult, record_parser
from .tmdb import TMDBApi
from .utils import setup_logger


class SearchSession(LoadState):
    """
    Paged search over one media type.

    - Blank queries clear the results without calling the API
    - Page 1 replaces the results, later pages append
    - A new query is always sent; the newest query's response wins
    - On failure the message is kept in `error`; results are cleared only
      when page 1 failed
    - Results keep the order TMDB returned them in
    """

    def __init__(self, search_page: Callable[[str, int], dict], parse: Callable, name: str = "search", log_dir=None):
        super().__init__(name, setup_logger("search", log_dir))
        self.search_page = search_page
        self.parse = parse
        self.query = ""
        self.results: list = []
        self.page = 1
        self.total_pages = 0
        self.total_results = 0

    @classmethod
    def for_media(cls, api: TMDBApi, media_type: MediaType, log_dir=None) -> "SearchSession":
        return cls(
            lambda query, page: api.search(media_type, query, page),
            record_parser(media_type),
            name=f"search/{media_type.value}",
            log_dir=log_dir,
        )

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages

    def clear(self) -> None:
        """Reset the session, error included. A pending response is dropped."""
        with self._lock:
            self._generation += 1
            self.query = ""
            self.results = []
            self.page = 1
            self.total_pages = 0
            self.total_results = 0
            self.loading = False
            self.error = None

    def search(self, query: str, page: int = 1) -> bool:
        """
        Run the query for one page.

        Returns:
            True if results were applied (a blank query counts), False on
            failure or when a newer search superseded this one
        """
        if not query or not query.strip():
            self.clear()
            return True
        return self._run(query, page, self._begin())

    def load_more(self) -> bool:
        """Fetch the next page of the current query, if there is one."""
        if not self.has_more:
            return False
        token = self._begin(exclusive=True)
        if token is None:
            return False
        return self._run(self.query, self.page + 1, token)

    def _run(self, query: str, page: int, token: int) -> bool:
        try:
            data = self.search_page(query, page)
            result = PagedResult.from_tmdb(data, self.parse)
        except TMDBError as e:
            with self._lock:
                if self._superseded(token):
                    return False
                self.error = str(e)
                if page == 1:
                    self.results = []
                self.loading = False
            self.logger.warning(f"{self.name} {query!r} page {page} failed: {e}")
            return False
        except Exception:
            self._abort(token)
            raise

        with self._lock:
            if self._superseded(token):
                return False
            self.query = query
            self.results = list(result.results) if page == 1 else self.results + result.results
            self.page = page
            self.total_pages = result.total_pages
            self.total_results = result.total_results
            self.loading = False
        self.logger.debug(f"{self.name} {query!r} page {page}: {len(result.results)} results")
        return True
