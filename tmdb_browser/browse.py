"""
Interactive browsing for TMDB Browser.

Shows one catalog category page by page and lets the user curate lists:
- [M] More: load the next page
- [F] n: toggle favorite for entry n
- [W] n: toggle watchlist for entry n
- [D] n: show details for entry n
- [Q] Quit (Ctrl+C works too)
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .catalog import Catalog, PagedFeed
from .exceptions import StorageError
from .lists import ListStorageService
from .utils import print_section, setup_logger


@dataclass
class BrowseStats:
    """Counters for one browse session."""

    pages_loaded: int = 0
    favorites_toggled: int = 0
    watchlist_toggled: int = 0
    details_viewed: int = 0
    exit_reason: str = ""

    def __str__(self) -> str:
        return (
            f"Pages: {self.pages_loaded}, favorites toggled: {self.favorites_toggled}, "
            f"watchlist toggled: {self.watchlist_toggled}, details viewed: {self.details_viewed}"
        )


class Browser:
    """Interactive loop over one catalog feed."""

    PROMPT = "Your choice [M / F n / W n / D n / Q]: "

    def __init__(
        self,
        catalog: Catalog,
        favorites: ListStorageService,
        watchlist: ListStorageService,
        log_dir=None,
    ):
        self.catalog = catalog
        self.favorites = favorites
        self.watchlist = watchlist
        self.logger = setup_logger("browse", log_dir)

    def display_page(self, feed: PagedFeed, start: int = 0) -> None:
        favorite_ids = set(self.favorites.get_ids())
        watchlist_ids = set(self.watchlist.get_ids())
        for i, item in enumerate(feed.items[start:], start + 1):
            marks = ("*" if item.id in favorite_ids else " ") + ("W" if item.id in watchlist_ids else " ")
            print(f"{marks}{item.display_line(i)}")
        print(f"\nPage {feed.page} of {feed.total_pages} ({feed.total_results} results)")

    def prompt(self) -> Tuple[str, Optional[int]]:
        """
        Read one command.

        Returns:
            (action, index) where action is 'm', 'f', 'w', 'd' or 'q' and
            index is the 1-based entry number for f/w/d
        """
        while True:
            try:
                parts = input(self.PROMPT).strip().lower().split()
            except EOFError:
                return "q", None

            if not parts:
                return "m", None
            action = parts[0][:1]
            if action in ("m", "q"):
                return action, None
            if action in ("f", "w", "d") and len(parts) == 2 and parts[1].isdigit():
                return action, int(parts[1])
            print("Invalid input. Examples: M, F 3, W 12, D 1, Q")

    def _toggle(self, service: ListStorageService, item, label: str) -> bool:
        try:
            member = service.toggle(item, raise_errors=True)
        except StorageError as e:
            print(f"ERROR updating {label}: {e}")
            return False
        print(f"{'Added to' if member else 'Removed from'} {label}: {item.display_title}")
        return True

    def run(self, category: str = "popular") -> BrowseStats:
        """Browse a category until the user quits."""
        stats = BrowseStats()
        feed = self.catalog.feed(category)

        if not feed.fetch(1):
            print(f"\nCould not load {feed.name}: {feed.error}")
            stats.exit_reason = "error"
            return stats
        stats.pages_loaded = 1

        print("(Press Ctrl+C at any time to exit)\n")
        self.display_page(feed)

        try:
            while True:
                action, index = self.prompt()

                if action == "q":
                    stats.exit_reason = "quit"
                    break

                if action == "m":
                    if not feed.has_more:
                        print("No more pages.")
                        continue
                    shown = len(feed.items)
                    if feed.load_more():
                        stats.pages_loaded += 1
                        print_section(f"Page {feed.page}")
                        self.display_page(feed, start=shown)
                    else:
                        print(f"Could not load more: {feed.error}")
                    continue

                if not 1 <= index <= len(feed.items):
                    print(f"Please enter a number between 1 and {len(feed.items)}")
                    continue
                item = feed.items[index - 1]

                if action == "f":
                    if self._toggle(self.favorites, item, "favorites"):
                        stats.favorites_toggled += 1
                elif action == "w":
                    if self._toggle(self.watchlist, item, "watchlist"):
                        stats.watchlist_toggled += 1
                elif action == "d":
                    details = self.catalog.details.load(item.id)
                    if details is None:
                        print(f"Could not load details: {self.catalog.details.error}")
                    else:
                        print(details.display_summary())
                        stats.details_viewed += 1

        except KeyboardInterrupt:
            print("\n\nInterrupted!")
            stats.exit_reason = "interrupted"

        self.logger.info(f"Browse session ended ({stats.exit_reason}): {stats}")
        return stats
