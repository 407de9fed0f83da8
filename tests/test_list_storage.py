"""
Favorites / watchlist flow tests.

Tests mimic what a user does with the lists: add, toggle, remove, clear,
and what happens when the store underneath fails.
"""

import threading
from unittest.mock import MagicMock

import pytest

from conftest import create_sample_movie, create_sample_series
from tmdb_browser.exceptions import StorageError
from tmdb_browser.lists import (
    LEGACY_WATCHLIST_KEY,
    ListStorageService,
    ListType,
    migrate_legacy_watchlist,
)
from tmdb_browser.models import MediaType, Movie, SavedItem


@pytest.fixture
def favorites(store, clock, tmp_path):
    return ListStorageService(store, ListType.MOVIE_FAVORITES, clock=clock, log_dir=tmp_path / "logs")


@pytest.fixture
def tv_watchlist(store, clock, tmp_path):
    return ListStorageService(store, ListType.TV_WATCHLIST, clock=clock, log_dir=tmp_path / "logs")


class TestToggleFlow:
    """User taps the heart icon on a movie."""

    def test_toggle_twice_returns_true_then_false(self, favorites):
        movie = create_sample_movie(550, "Fight Club")

        assert favorites.toggle(movie) is True
        assert favorites.is_member(550)

        assert favorites.toggle(movie) is False
        assert not favorites.is_member(550)

    def test_toggle_on_present_id_removes_it(self, favorites):
        favorites.add(create_sample_movie(550))

        assert favorites.toggle(create_sample_movie(550)) is False
        assert favorites.count() == 0

    def test_toggle_accepts_model_records(self, favorites):
        movie = Movie.from_tmdb(create_sample_movie(27205, "Inception"))

        assert favorites.toggle(movie) is True
        saved = favorites.get(27205)
        assert saved.title == "Inception"


class TestAddAndRemoveFlow:
    """User curates a list over time."""

    def test_remove_absent_id_succeeds_and_leaves_count(self, favorites):
        favorites.add(create_sample_movie(1))
        favorites.add(create_sample_movie(2))

        assert favorites.remove(999) is True
        assert favorites.count() == 2

    def test_remove_absent_id_does_not_rewrite_document(self, favorites, store):
        favorites.add(create_sample_movie(1))
        before = store.get_item("favorites")["lastUpdated"]

        favorites.remove(999)

        assert store.get_item("favorites")["lastUpdated"] == before

    def test_list_all_is_newest_first(self, favorites):
        for movie_id in (10, 20, 30):
            favorites.add(create_sample_movie(movie_id))

        items = favorites.list_all()

        assert [item.id for item in items] == [30, 20, 10]
        for newer, older in zip(items, items[1:]):
            assert newer.added_at >= older.added_at

    def test_readd_moves_entry_to_front(self, favorites):
        for movie_id in (10, 20, 30):
            favorites.add(create_sample_movie(movie_id))
        first_added = favorites.get(10).added_at

        favorites.add(create_sample_movie(10))

        assert favorites.get_ids()[0] == 10
        assert favorites.get(10).added_at > first_added
        assert favorites.count() == 3

    def test_clear_all_empties_the_list(self, favorites):
        for movie_id in (1, 2, 3):
            favorites.add(create_sample_movie(movie_id))

        assert favorites.clear_all() is True
        assert favorites.count() == 0
        assert favorites.list_all() == []

    def test_entries_are_saved_items_with_record_fields(self, favorites):
        favorites.add(create_sample_movie(550, "Fight Club"))

        item = favorites.list_all()[0]

        assert isinstance(item, SavedItem)
        assert item.media_type == MediaType.MOVIE
        assert item.item.title == "Fight Club"
        assert item.to_dict()["addedAt"] == item.added_at


class TestStoredDocument:
    """The stored shape stays compatible with existing app data."""

    def test_document_shape_for_movies(self, favorites, store):
        favorites.add(create_sample_movie(550))

        document = store.get_item("favorites")

        assert set(document) == {"movies", "lastUpdated"}
        assert "550" in document["movies"]
        assert document["movies"]["550"]["addedAt"]

    def test_document_shape_for_tv(self, tv_watchlist, store):
        tv_watchlist.add(create_sample_series(1396, "Breaking Bad"))

        document = store.get_item("tv_watchlist")

        assert "1396" in document["tvSeries"]
        assert tv_watchlist.list_all()[0].title == "Breaking Bad"

    def test_lists_are_independent(self, store, clock):
        favorites = ListStorageService(store, ListType.MOVIE_FAVORITES, clock=clock)
        watchlist = ListStorageService(store, ListType.MOVIE_WATCHLIST, clock=clock)

        favorites.add(create_sample_movie(550))
        watchlist.add(create_sample_movie(550))
        favorites.remove(550)

        assert not favorites.is_member(550)
        assert watchlist.is_member(550)

    def test_empty_document(self, favorites):
        assert favorites.get_document() == {"movies": {}, "lastUpdated": None}

    def test_clear_keeps_empty_document(self, favorites, store, clock):
        favorites.add(create_sample_movie(550))

        favorites.clear_all()

        assert store.get_item("favorites") == {"movies": {}, "lastUpdated": clock.now.isoformat()}
        assert favorites.get_document()["lastUpdated"] == clock.now.isoformat()

    def test_list_type_lookup(self):
        assert ListType.lookup(MediaType.TV, "favorites") is ListType.TV_FAVORITES
        assert ListType.lookup(MediaType.MOVIE, "watchlist").key == "movie_watchlist"
        with pytest.raises(ValueError):
            ListType.lookup(MediaType.MOVIE, "seen")


class TestStorageFailure:
    """Storage errors are downgraded unless the caller asks for them."""

    @pytest.fixture
    def broken_store(self):
        store = MagicMock()
        store.get_item.side_effect = StorageError("disk I/O error")
        store.set_item.side_effect = StorageError("disk I/O error")
        store.remove_item.side_effect = StorageError("disk I/O error")
        return store

    def test_operations_downgrade_to_empty_results(self, broken_store):
        service = ListStorageService(broken_store, ListType.MOVIE_FAVORITES)

        assert service.add(create_sample_movie(1)) is False
        assert service.toggle(create_sample_movie(1)) is False
        assert service.remove(1) is False
        assert service.is_member(1) is False
        assert service.list_all() == []
        assert service.count() == 0
        assert service.clear_all() is False

    def test_last_error_tells_failure_from_empty(self, broken_store, store):
        service = ListStorageService(broken_store, ListType.MOVIE_FAVORITES)
        assert service.count() == 0
        assert "disk I/O error" in service.last_error

        healthy = ListStorageService(store, ListType.MOVIE_FAVORITES)
        assert healthy.count() == 0
        assert healthy.last_error is None

    def test_last_error_cleared_by_next_success(self, store):
        service = ListStorageService(store, ListType.MOVIE_FAVORITES)
        store.set_item("favorites", "not a document")

        assert service.list_all() == []
        assert service.last_error is not None

        store.remove_item("favorites")
        assert service.add(create_sample_movie(1)) is True
        assert service.last_error is None

    def test_raise_errors_reraises_and_records(self, broken_store):
        service = ListStorageService(broken_store, ListType.MOVIE_FAVORITES)

        with pytest.raises(StorageError):
            service.toggle(create_sample_movie(1), raise_errors=True)
        with pytest.raises(StorageError):
            service.clear_all(raise_errors=True)
        with pytest.raises(StorageError):
            service.get_document(raise_errors=True)

        assert "disk I/O error" in service.last_error

    def test_failure_reaches_its_own_caller_despite_concurrent_success(self):
        started, release = threading.Event(), threading.Event()
        calls = []

        def get_item(key):
            calls.append(key)
            if len(calls) == 1:
                started.set()
                release.wait(timeout=5)
                raise StorageError("database is locked")
            return None

        store = MagicMock()
        store.get_item.side_effect = get_item
        service = ListStorageService(store, ListType.MOVIE_FAVORITES)
        errors = []

        def failing_count():
            try:
                service.count(raise_errors=True)
            except StorageError as e:
                errors.append(e)

        worker = threading.Thread(target=failing_count)
        worker.start()
        assert started.wait(timeout=5)

        # A healthy call finishes while the first one is still failing
        assert service.count(raise_errors=True) == 0

        release.set()
        worker.join(timeout=5)

        assert len(errors) == 1
        assert "locked" in str(errors[0])

    def test_record_without_id_is_rejected(self, favorites):
        with pytest.raises(ValueError):
            favorites.add({"title": "No id"})


class TestConcurrentWriters:
    """Several threads mutating one list never lose an update."""

    def test_parallel_adds_all_land(self, store):
        service = ListStorageService(store, ListType.MOVIE_WATCHLIST)

        threads = [
            threading.Thread(target=service.add, args=(create_sample_movie(movie_id),))
            for movie_id in range(1, 21)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert service.count() == 20


class TestLegacyMigration:
    """An old install has TV shows under the ad hoc 'watchlist' key."""

    def test_migrates_array_into_tv_watchlist(self, store, tv_watchlist):
        store.set_item(LEGACY_WATCHLIST_KEY, [
            {**create_sample_series(1396, "Breaking Bad"), "addedAt": 1700000000000},
            {**create_sample_series(1399, "Game of Thrones"), "addedAt": 1700000500000},
        ])

        moved = migrate_legacy_watchlist(store, tv_watchlist)

        assert moved == 2
        assert not store.has_item(LEGACY_WATCHLIST_KEY)
        assert tv_watchlist.get_ids() == [1399, 1396]
        assert tv_watchlist.get(1396).added_at.startswith("2023-11-14")

    def test_existing_entries_are_kept(self, store, tv_watchlist):
        tv_watchlist.add(create_sample_series(1396, "Breaking Bad"))
        kept = tv_watchlist.get(1396).added_at
        store.set_item(LEGACY_WATCHLIST_KEY, [{**create_sample_series(1396), "addedAt": 1}])

        assert migrate_legacy_watchlist(store, tv_watchlist) == 0
        assert tv_watchlist.get(1396).added_at == kept

    def test_nothing_to_migrate(self, store, tv_watchlist):
        assert migrate_legacy_watchlist(store, tv_watchlist) == 0

    def test_malformed_legacy_value_raises(self, store, tv_watchlist):
        store.set_item(LEGACY_WATCHLIST_KEY, {"not": "a list"})

        with pytest.raises(StorageError):
            migrate_legacy_watchlist(store, tv_watchlist)
