"""
Command-line interface for TMDB Browser.

Provides commands for:
- status: Show configuration and list sizes
- test: Check the data source
- catalog: Page through a category (popular, top_rated, ...)
- trending: Trending movies or series for a day/week window
- search: Search movies or series
- details: Details page for one title
- season: Episodes of one TV season
- favorites / watchlist: Manage the local lists
- migrate-legacy: Move the legacy TV watchlist into tv_watchlist
- browse: Interactive browsing
"""

import argparse
import sys
from typing import Optional

from .browse import Browser
from .catalog import CATEGORIES
from .config import Config
from .exceptions import StorageError, TMDBError
from .models import MediaType, image_url, record_parser
from .state import AppState, build_app_state
from .tmdb import TIME_WINDOWS
from .utils import (
    confirm_action,
    format_number,
    print_header,
    print_section,
    print_status_table,
    progress_bar,
    truncate_string,
    Timer,
)

LIST_ACTIONS = ("list", "add", "remove", "toggle", "clear", "count")


def _add_tv_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tv",
        action="store_true",
        help="Work on TV series instead of movies",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="tmdb_browser",
        description="TMDB Browser - Browse movies and TV series, manage favorites and watchlists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check configuration
  python -m tmdb_browser status

  # Two pages of popular movies
  python -m tmdb_browser catalog popular --pages 2

  # Trending series today
  python -m tmdb_browser trending --tv --window day

  # Search and show details
  python -m tmdb_browser search "Inception"
  python -m tmdb_browser details 27205

  # Lists
  python -m tmdb_browser favorites add 550
  python -m tmdb_browser watchlist list --tv

  # Interactive browsing
  python -m tmdb_browser browse --category top_rated
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "status",
        help="Show configuration and list sizes",
    )

    subparsers.add_parser(
        "test",
        help="Test the data source by fetching a known movie",
    )

    categories = sorted(set(CATEGORIES[MediaType.MOVIE]) | set(CATEGORIES[MediaType.TV]))
    catalog_parser = subparsers.add_parser(
        "catalog",
        help="List one catalog category",
    )
    catalog_parser.add_argument(
        "category",
        choices=categories,
        help="Category (movies: popular, top_rated, now_playing, upcoming; "
        "tv: popular, top_rated, on_the_air, airing_today)",
    )
    catalog_parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to accumulate (default: 1)",
    )
    _add_tv_flag(catalog_parser)

    trending_parser = subparsers.add_parser(
        "trending",
        help="Show trending titles",
    )
    trending_parser.add_argument(
        "--window",
        choices=TIME_WINDOWS,
        default="week",
        help="Time window (default: week)",
    )
    _add_tv_flag(trending_parser)

    search_parser = subparsers.add_parser(
        "search",
        help="Search by title",
    )
    search_parser.add_argument(
        "query",
        help="Title to search for",
    )
    search_parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of result pages to fetch (default: 1)",
    )
    _add_tv_flag(search_parser)

    details_parser = subparsers.add_parser(
        "details",
        help="Show the details page for a title",
    )
    details_parser.add_argument(
        "id",
        type=int,
        help="TMDB id",
    )
    details_parser.add_argument(
        "--reviews",
        action="store_true",
        help="Also show the first page of user reviews",
    )
    _add_tv_flag(details_parser)

    season_parser = subparsers.add_parser(
        "season",
        help="Show the episodes of a TV season",
    )
    season_parser.add_argument(
        "tv_id",
        type=int,
        help="TMDB id of the series",
    )
    season_parser.add_argument(
        "season_number",
        type=int,
        help="Season number",
    )

    for label in ("favorites", "watchlist"):
        list_parser = subparsers.add_parser(
            label,
            help=f"Manage the {label} list",
        )
        list_parser.add_argument(
            "action",
            choices=LIST_ACTIONS,
            help="list, add ID, remove ID, toggle ID, clear or count",
        )
        list_parser.add_argument(
            "id",
            type=int,
            nargs="?",
            help="TMDB id (for add, remove and toggle)",
        )
        list_parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Skip confirmation prompt for clear",
        )
        _add_tv_flag(list_parser)

    subparsers.add_parser(
        "migrate-legacy",
        help="Move the legacy 'watchlist' key into the TV watchlist",
    )

    browse_parser = subparsers.add_parser(
        "browse",
        help="Interactive browsing (page through a category, curate lists)",
    )
    browse_parser.add_argument(
        "--category",
        default="popular",
        help="Category to browse (default: popular)",
    )
    _add_tv_flag(browse_parser)

    return parser


def _media_type(args) -> MediaType:
    return MediaType.TV if getattr(args, "tv", False) else MediaType.MOVIE


def _print_items(items, start: int = 1) -> None:
    for i, item in enumerate(items, start):
        print(item.display_line(i))


def cmd_status(state: AppState) -> int:
    """Run status command."""
    print_header("TMDB Browser Status")

    print_status_table(state.config.summary(), title="Configuration")
    print_status_table(
        {"Data source": type(state.source).__name__},
        title="Data Source",
    )
    print_status_table(
        {key: format_number(count) for key, count in state.list_counts().items()},
        title="Lists",
    )
    return 0


def cmd_test(state: AppState) -> int:
    """Run test connection command."""
    print_header("Connection Test")

    ok = state.source.test_connection()
    print(f"\n{type(state.source).__name__}: {'OK' if ok else 'FAILED'}")
    return 0 if ok else 1


def cmd_catalog(state: AppState, args) -> int:
    """Run catalog command."""
    media_type = _media_type(args)
    catalog = state.catalog(media_type)
    feed = catalog.feed(args.category)

    print_header(f"{media_type.value.upper()} / {args.category}")

    with Timer("Loaded") as timer:
        if not feed.fetch(1):
            print(f"\nError: {feed.error}")
            return 1

        for _ in progress_bar(range(max(args.pages, 1) - 1), desc="Loading pages", unit="page"):
            if not feed.load_more():
                print(f"\nError: {feed.error}")
                break

    _print_items(feed.items)
    print(f"\nShowing {len(feed.items)} of {format_number(feed.total_results)} (page {feed.page}/{feed.total_pages})")
    print(timer)
    return 0 if feed.error is None else 1


def cmd_trending(state: AppState, args) -> int:
    """Run trending command."""
    media_type = _media_type(args)
    trending = state.catalog(media_type).trending

    print_header(f"Trending {media_type.value.upper()} ({args.window})")

    if not trending.fetch(args.window):
        print(f"\nError: {trending.error}")
        return 1

    _print_items(trending.items)
    return 0


def cmd_search(state: AppState, args) -> int:
    """Run search command."""
    media_type = _media_type(args)
    session = state.search(media_type)

    print_header(f"Search {media_type.value.upper()}")

    if not session.search(args.query):
        print(f"\nError: {session.error}")
        return 1

    for _ in range(max(args.pages, 1) - 1):
        if not session.has_more:
            break
        if not session.load_more():
            print(f"\nError: {session.error}")
            break

    if not session.results:
        print(f"\nNo results for '{args.query}'")
        return 0

    print(f"\nFound {format_number(session.total_results)} results:\n")
    _print_items(session.results)
    if session.has_more:
        print(f"\n(page {session.page} of {session.total_pages}, use --pages to see more)")
    return 0


def cmd_details(state: AppState, args) -> int:
    """Run details command."""
    media_type = _media_type(args)
    catalog = state.catalog(media_type)

    page = catalog.load_details_page(args.id)
    if page is None:
        print(f"Error: {catalog.details.error}")
        return 1

    print(page.details.display_summary())

    directors = page.credits.get_directors()
    if directors:
        print(f"DIRECTOR: {', '.join(d.name for d in directors)}")
    cast = page.credits.top_cast()
    if cast:
        print_section("Top Cast")
        for member in cast:
            print(f"  {member.name} as {member.character or '?'}")

    poster = image_url(page.details.poster_path)
    if poster:
        print(f"\nPoster: {poster}")
    trailer = page.trailer
    if trailer and trailer.url:
        print(f"Trailer: {trailer.url}")

    for title, items in (("Similar", page.similar), ("Recommended", page.recommendations)):
        if items:
            print_section(title)
            _print_items(items[:5])

    if args.reviews:
        reviews = catalog.load_reviews(args.id)
        print_section(f"Reviews ({format_number(reviews.total_results)})")
        for review in reviews.results[:3]:
            rating = f" ({review.rating:g}/10)" if review.rating is not None else ""
            print(f"  {review.author}{rating}: {truncate_string(' '.join(review.content.split()), 200)}")

    in_favorites = state.favorites(media_type).is_member(args.id)
    in_watchlist = state.watchlist(media_type).is_member(args.id)
    print(f"\nFavorite: {'yes' if in_favorites else 'no'}  Watchlist: {'yes' if in_watchlist else 'no'}")
    return 0


def cmd_season(state: AppState, args) -> int:
    """Run season command."""
    catalog = state.catalog(MediaType.TV)

    season = catalog.load_season(args.tv_id, args.season_number)
    if season is None:
        print(f"Error: {catalog.season.error}")
        return 1

    print_header(f"{season.name} ({season.air_date or 'TBA'})")
    if season.overview:
        print(truncate_string(season.overview, 300))
        print()
    for episode in season.episodes:
        print(episode.display_line())
    print(f"\n{len(season.episodes)} episodes")
    return 0


def _fetch_record(state: AppState, media_type: MediaType, item_id: int):
    """Fetch the list record for an id. Raises TMDBError."""
    return record_parser(media_type)(state.api.get_details(media_type, item_id))


def cmd_list(state: AppState, args) -> int:
    """Run favorites / watchlist command. Storage failures raise StorageError."""
    media_type = _media_type(args)
    service = state.list_service(media_type, args.command)
    name = f"{media_type.value} {args.command}"

    if args.action in ("add", "remove", "toggle") and args.id is None:
        print(f"Error: '{args.action}' needs an id")
        return 1

    if args.action == "list":
        print_header(name.title())
        entries = service.list_all(raise_errors=True)
        if not entries:
            print(f"\nYour {name} list is empty")
            return 0
        for i, entry in enumerate(entries, 1):
            print(f"{entry.item.display_line(i)} - added {entry.added_at[:10]}")
        return 0

    if args.action == "count":
        print(f"{name}: {format_number(service.count(raise_errors=True))}")
        return 0

    if args.action == "clear":
        if not args.yes and not confirm_action(f"Clear your {name} list?"):
            print("Cancelled.")
            return 0
        service.clear_all(raise_errors=True)
        print(f"Cleared {name}")
        return 0

    if args.action == "remove":
        service.remove(args.id, raise_errors=True)
        print(f"Removed {args.id} from {name}")
        return 0

    record = _fetch_record(state, media_type, args.id)
    if args.action == "add":
        service.add(record, raise_errors=True)
        print(f"Added '{record.display_title}' to {name}")
        return 0

    member = service.toggle(record, raise_errors=True)
    verb = "Added" if member else "Removed"
    print(f"{verb} '{record.display_title}' {'to' if member else 'from'} {name}")
    return 0


def cmd_migrate_legacy(state: AppState) -> int:
    """Run migrate-legacy command."""
    print_header("Migrate Legacy Watchlist")

    moved = state.migrate_legacy()
    print(f"\nMigrated {moved} entries into tv_watchlist")
    return 0


def cmd_browse(state: AppState, args) -> int:
    """Run interactive browse command."""
    media_type = _media_type(args)
    print_header(f"Browse {media_type.value.upper()} / {args.category}")

    browser = Browser(
        state.catalog(media_type),
        state.favorites(media_type),
        state.watchlist(media_type),
        log_dir=state.config.log_dir,
    )
    stats = browser.run(args.category)
    print(f"\n{stats}")
    return 1 if stats.exit_reason == "error" else 0


def main(args: Optional[list] = None, state: Optional[AppState] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    # Build application state
    owns_state = state is None
    if owns_state:
        try:
            config = Config.from_env()
            state = build_app_state(config)
        except ValueError as e:
            print(f"Configuration error: {e}")
            print("\nMake sure your .env file contains:")
            print("  TMDB_API_KEY=<your_tmdb_api_key>")
            print("  (or set USE_MOCK_DATA=true / MOCK_FALLBACK=true to use fixture data)")
            print("  STORAGE_URL=<sqlalchemy url> (optional, defaults to a local SQLite file)")
            return 1
        except StorageError as e:
            print(f"Error opening storage: {e}")
            return 1

    # Route to command handler
    try:
        if parsed_args.command == "status":
            return cmd_status(state)
        elif parsed_args.command == "test":
            return cmd_test(state)
        elif parsed_args.command == "catalog":
            return cmd_catalog(state, parsed_args)
        elif parsed_args.command == "trending":
            return cmd_trending(state, parsed_args)
        elif parsed_args.command == "search":
            return cmd_search(state, parsed_args)
        elif parsed_args.command == "details":
            return cmd_details(state, parsed_args)
        elif parsed_args.command == "season":
            return cmd_season(state, parsed_args)
        elif parsed_args.command in ("favorites", "watchlist"):
            return cmd_list(state, parsed_args)
        elif parsed_args.command == "migrate-legacy":
            return cmd_migrate_legacy(state)
        elif parsed_args.command == "browse":
            return cmd_browse(state, parsed_args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        return 130
    except (TMDBError, StorageError, ValueError) as e:
        print(f"\nError: {e}")
        return 1
    finally:
        if owns_state:
            state.close()


if __name__ == "__main__":
    sys.exit(main())
