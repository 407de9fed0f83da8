"""
Search user flow tests.
"""

import threading

import pytest

from conftest import FakeDataSource, sample_page
from tmdb_browser.exceptions import TMDBError
from tmdb_browser.models import MediaType, Movie, TVSeries
from tmdb_browser.search import SearchSession
from tmdb_browser.tmdb import TMDBApi


@pytest.fixture
def movie_search(fake_source, tmp_path):
    return SearchSession.for_media(TMDBApi(fake_source), MediaType.MOVIE, log_dir=tmp_path / "logs")


class TestSearchFlow:
    """User types in the search box."""

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_makes_no_request(self, movie_search, fake_source, query):
        assert movie_search.search(query) is True

        assert fake_source.calls == []
        assert movie_search.results == []
        assert movie_search.total_pages == 0
        assert movie_search.total_results == 0
        assert movie_search.page == 1

    def test_blank_query_clears_previous_results(self, movie_search):
        movie_search.search("inception")
        assert movie_search.results

        movie_search.search("")

        assert movie_search.results == []
        assert not movie_search.has_more

    def test_query_is_sent_as_typed(self, movie_search, fake_source):
        movie_search.search("  the dark knight ")

        assert fake_source.calls_to("/search/movie") == [{"query": "  the dark knight ", "page": 1}]

    def test_load_more_until_last_page(self, movie_search, fake_source):
        movie_search.search("star")
        assert movie_search.total_pages == 3
        assert isinstance(movie_search.results[0], Movie)

        assert movie_search.load_more()
        assert movie_search.load_more()
        assert movie_search.load_more() is False

        assert len(movie_search.results) == 12
        assert movie_search.page == 3
        assert [params["page"] for params in fake_source.calls_to("/search/movie")] == [1, 2, 3]

    def test_results_keep_remote_order(self, movie_search):
        movie_search.search("star")

        assert [movie.id for movie in movie_search.results] == [1000, 1001, 1002, 1003]

    def test_tv_search(self, fake_source, tmp_path):
        session = SearchSession.for_media(TMDBApi(fake_source), MediaType.TV, log_dir=tmp_path / "logs")

        session.search("breaking")

        assert isinstance(session.results[0], TVSeries)
        assert fake_source.calls_to("/search/tv")

    def test_clear_resets_error(self, tmp_path):
        source = FakeDataSource({"/search/movie": TMDBError.from_response(500, "boom")})
        session = SearchSession.for_media(TMDBApi(source), MediaType.MOVIE, log_dir=tmp_path / "logs")
        session.search("x")
        assert session.error

        session.clear()

        assert session.error is None
        assert session.query == ""


class TestSearchErrors:
    """Failures keep or clear results depending on the page."""

    @staticmethod
    def _session(tmp_path, fail_pages):
        def search(params):
            if params["page"] in fail_pages:
                raise TMDBError.from_response(401, "Invalid API key")
            return sample_page(params["page"], total_pages=3, per_page=4)

        source = FakeDataSource({"/search/movie": search})
        return SearchSession.for_media(TMDBApi(source), MediaType.MOVIE, log_dir=tmp_path / "logs")

    def test_first_page_failure_clears_results(self, tmp_path):
        session = self._session(tmp_path, fail_pages={1})
        session.results = ["stale"]

        assert session.search("matrix") is False

        assert session.results == []
        assert "401" in session.error

    def test_later_page_failure_keeps_results(self, tmp_path):
        session = self._session(tmp_path, fail_pages={2})
        session.search("matrix")

        assert session.load_more() is False

        assert len(session.results) == 4
        assert session.page == 1
        assert "401" in session.error
        assert not session.loading


class TestOverlappingSearches:
    """User keeps typing while an earlier query is still in flight."""

    @staticmethod
    def _slow_session(tmp_path, slow_query):
        started, release = threading.Event(), threading.Event()

        def search(params):
            if params["query"] == slow_query:
                started.set()
                release.wait(timeout=5)
                return sample_page(1, total_pages=1, per_page=2)
            return sample_page(1, total_pages=3, per_page=4)

        source = FakeDataSource({"/search/movie": search})
        session = SearchSession.for_media(TMDBApi(source), MediaType.MOVIE, log_dir=tmp_path / "logs")
        return session, source, started, release

    def test_new_query_is_sent_and_wins(self, tmp_path):
        session, source, started, release = self._slow_session(tmp_path, "alien")
        worker = threading.Thread(target=session.search, args=("alien",))
        worker.start()
        assert started.wait(timeout=5)

        assert session.search("batman") is True

        release.set()
        worker.join(timeout=5)

        assert [params["query"] for params in source.calls_to("/search/movie")] == ["alien", "batman"]
        assert session.query == "batman"
        assert len(session.results) == 4
        assert session.total_pages == 3
        assert not session.loading

    def test_clear_drops_pending_response(self, tmp_path):
        session, _, started, release = self._slow_session(tmp_path, "alien")
        worker = threading.Thread(target=session.search, args=("alien",))
        worker.start()
        assert started.wait(timeout=5)

        session.search("")

        release.set()
        worker.join(timeout=5)

        assert session.query == ""
        assert session.results == []
        assert not session.loading
