"""
Data models for TMDB Browser.

Provides dataclasses for type-safe handling of TMDB payloads and of the
records kept in the local favorites / watchlist storage.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional, Union

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


class MediaType(str, Enum):
    """Content type of a record."""

    MOVIE = "movie"
    TV = "tv"


def image_url(path: Optional[str], size: str = "w500") -> Optional[str]:
    """Build a full image URL from a TMDB poster/backdrop/profile path."""
    if not path:
        return None
    return f"{IMAGE_BASE_URL}/{size}{path}"


def _names(items: Optional[list], key: str = "name") -> List[str]:
    return [i.get(key) for i in items or [] if i.get(key)]


@dataclass
class Genre:
    """Genre id/name pair."""

    id: int
    name: str

    @classmethod
    def from_tmdb(cls, data: dict) -> "Genre":
        return cls(id=data.get("id"), name=data.get("name", ""))


@dataclass
class Movie:
    """Movie list record as returned by the catalog and search endpoints."""

    id: int
    title: str
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    adult: bool = False
    genre_ids: List[int] = field(default_factory=list)
    original_language: str = ""
    original_title: str = ""
    popularity: float = 0.0
    video: bool = False

    @property
    def display_title(self) -> str:
        return self.title

    @property
    def year(self) -> str:
        return self.release_date[:4] if self.release_date else "Unknown"

    def to_dict(self) -> dict:
        """Convert to a plain dict (the stored record shape)."""
        return asdict(self)

    def display_line(self, index: int) -> str:
        """Return single-line display for result lists."""
        return f"  [{index}] {self.title} ({self.year}) - {self.vote_average:.1f}/10 - ID: {self.id}"

    @classmethod
    def from_tmdb(cls, data: dict) -> "Movie":
        """Create Movie from a TMDB list entry."""
        return cls(
            id=data.get("id"),
            title=data.get("title") or data.get("name") or "Unknown",
            overview=data.get("overview") or "",
            poster_path=data.get("poster_path"),
            backdrop_path=data.get("backdrop_path"),
            release_date=data.get("release_date") or "",
            vote_average=data.get("vote_average") or 0.0,
            vote_count=data.get("vote_count") or 0,
            adult=data.get("adult", False),
            genre_ids=list(data.get("genre_ids") or []),
            original_language=data.get("original_language") or "",
            original_title=data.get("original_title") or "",
            popularity=data.get("popularity") or 0.0,
            video=data.get("video", False),
        )


@dataclass
class TVSeries:
    """TV series list record."""

    id: int
    name: str
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    first_air_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: List[int] = field(default_factory=list)
    original_language: str = ""
    original_name: str = ""
    popularity: float = 0.0
    origin_country: List[str] = field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.name

    @property
    def year(self) -> str:
        return self.first_air_date[:4] if self.first_air_date else "Unknown"

    def to_dict(self) -> dict:
        return asdict(self)

    def display_line(self, index: int) -> str:
        return f"  [{index}] {self.name} ({self.year}) - {self.vote_average:.1f}/10 - ID: {self.id}"

    @classmethod
    def from_tmdb(cls, data: dict) -> "TVSeries":
        """Create TVSeries from a TMDB list entry."""
        return cls(
            id=data.get("id"),
            name=data.get("name") or data.get("title") or "Unknown",
            overview=data.get("overview") or "",
            poster_path=data.get("poster_path"),
            backdrop_path=data.get("backdrop_path"),
            first_air_date=data.get("first_air_date") or "",
            vote_average=data.get("vote_average") or 0.0,
            vote_count=data.get("vote_count") or 0,
            genre_ids=list(data.get("genre_ids") or []),
            original_language=data.get("original_language") or "",
            original_name=data.get("original_name") or "",
            popularity=data.get("popularity") or 0.0,
            origin_country=list(data.get("origin_country") or []),
        )


@dataclass
class MovieDetails(Movie):
    """Movie details page payload."""

    genres: List[Genre] = field(default_factory=list)
    runtime: Optional[int] = None
    budget: int = 0
    revenue: int = 0
    homepage: str = ""
    imdb_id: Optional[str] = None
    status: str = ""
    tagline: str = ""
    production_companies: List[str] = field(default_factory=list)
    spoken_languages: List[str] = field(default_factory=list)

    def display_summary(self) -> str:
        """Return formatted string for terminal display."""
        lines = ["=" * 60, f"TITLE: {self.title}"]

        if self.original_title and self.original_title != self.title:
            lines.append(f"ORIGINAL TITLE: {self.original_title}")
        if self.tagline:
            lines.append(f"TAGLINE: {self.tagline}")

        lines.append(f"RELEASE DATE: {self.release_date or 'Unknown'}")
        lines.append(f"TMDB ID: {self.id}")
        if self.imdb_id:
            lines.append(f"IMDB ID: {self.imdb_id}")

        lines.append("-" * 60)
        if self.overview:
            overview = self.overview[:300] + "..." if len(self.overview) > 300 else self.overview
            lines.append(f"OVERVIEW: {overview}")
            lines.append("-" * 60)

        if self.genres:
            lines.append(f"GENRES: {', '.join(g.name for g in self.genres)}")
        if self.runtime:
            lines.append(f"RUNTIME: {self.runtime} min")
        if self.vote_average:
            lines.append(f"RATING: {self.vote_average}/10 ({self.vote_count} votes)")
        if self.production_companies:
            lines.append(f"PRODUCTION: {', '.join(self.production_companies)}")

        lines.append("=" * 60)
        return "\n".join(lines)

    @classmethod
    def from_tmdb(cls, data: dict) -> "MovieDetails":
        """Create MovieDetails from a /movie/{id} response."""
        values = asdict(Movie.from_tmdb(data))
        genres = [Genre.from_tmdb(g) for g in data.get("genres") or []]
        if not values["genre_ids"]:
            values["genre_ids"] = [g.id for g in genres]
        return cls(
            **values,
            genres=genres,
            runtime=data.get("runtime"),
            budget=data.get("budget") or 0,
            revenue=data.get("revenue") or 0,
            homepage=data.get("homepage") or "",
            imdb_id=data.get("imdb_id"),
            status=data.get("status") or "",
            tagline=data.get("tagline") or "",
            production_companies=_names(data.get("production_companies")),
            spoken_languages=_names(data.get("spoken_languages"), "english_name"),
        )


@dataclass
class Season:
    """Season summary (from TV details) or full season with episodes."""

    id: int
    name: str
    season_number: int
    episode_count: int = 0
    air_date: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    episodes: List["Episode"] = field(default_factory=list)

    @classmethod
    def from_tmdb(cls, data: dict) -> "Season":
        episodes = [Episode.from_tmdb(e) for e in data.get("episodes") or []]
        return cls(
            id=data.get("id"),
            name=data.get("name") or f"Season {data.get('season_number', 0)}",
            season_number=data.get("season_number", 0),
            episode_count=data.get("episode_count") or len(episodes),
            air_date=data.get("air_date") or "",
            overview=data.get("overview") or "",
            poster_path=data.get("poster_path"),
            episodes=episodes,
        )


@dataclass
class Episode:
    """Single episode of a season."""

    id: int
    name: str
    episode_number: int
    season_number: int
    overview: str = ""
    air_date: str = ""
    runtime: Optional[int] = None
    vote_average: float = 0.0
    vote_count: int = 0
    still_path: Optional[str] = None

    def display_line(self) -> str:
        runtime = f" ({self.runtime} min)" if self.runtime else ""
        return f"  E{self.episode_number:02d} {self.name}{runtime} - {self.air_date or 'TBA'}"

    @classmethod
    def from_tmdb(cls, data: dict) -> "Episode":
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            episode_number=data.get("episode_number", 0),
            season_number=data.get("season_number", 0),
            overview=data.get("overview") or "",
            air_date=data.get("air_date") or "",
            runtime=data.get("runtime"),
            vote_average=data.get("vote_average") or 0.0,
            vote_count=data.get("vote_count") or 0,
            still_path=data.get("still_path"),
        )


@dataclass
class TVSeriesDetails(TVSeries):
    """TV series details page payload."""

    genres: List[Genre] = field(default_factory=list)
    episode_run_time: List[int] = field(default_factory=list)
    number_of_episodes: int = 0
    number_of_seasons: int = 0
    seasons: List[Season] = field(default_factory=list)
    status: str = ""
    tagline: str = ""
    type: str = ""
    last_air_date: str = ""
    homepage: str = ""
    in_production: bool = False
    networks: List[str] = field(default_factory=list)

    def display_summary(self) -> str:
        lines = ["=" * 60, f"NAME: {self.name}"]
        if self.original_name and self.original_name != self.name:
            lines.append(f"ORIGINAL NAME: {self.original_name}")
        if self.tagline:
            lines.append(f"TAGLINE: {self.tagline}")
        lines.append(f"FIRST AIRED: {self.first_air_date or 'Unknown'}")
        if self.last_air_date:
            lines.append(f"LAST AIRED: {self.last_air_date}")
        lines.append(f"TMDB ID: {self.id}")
        lines.append("-" * 60)
        if self.overview:
            overview = self.overview[:300] + "..." if len(self.overview) > 300 else self.overview
            lines.append(f"OVERVIEW: {overview}")
            lines.append("-" * 60)
        if self.genres:
            lines.append(f"GENRES: {', '.join(g.name for g in self.genres)}")
        lines.append(f"SEASONS: {self.number_of_seasons} ({self.number_of_episodes} episodes)")
        if self.networks:
            lines.append(f"NETWORKS: {', '.join(self.networks)}")
        if self.status:
            lines.append(f"STATUS: {self.status}")
        if self.vote_average:
            lines.append(f"RATING: {self.vote_average}/10 ({self.vote_count} votes)")
        lines.append("=" * 60)
        return "\n".join(lines)

    @classmethod
    def from_tmdb(cls, data: dict) -> "TVSeriesDetails":
        """Create TVSeriesDetails from a /tv/{id} response."""
        values = asdict(TVSeries.from_tmdb(data))
        genres = [Genre.from_tmdb(g) for g in data.get("genres") or []]
        if not values["genre_ids"]:
            values["genre_ids"] = [g.id for g in genres]
        return cls(
            **values,
            genres=genres,
            episode_run_time=list(data.get("episode_run_time") or []),
            number_of_episodes=data.get("number_of_episodes") or 0,
            number_of_seasons=data.get("number_of_seasons") or 0,
            seasons=[Season.from_tmdb(s) for s in data.get("seasons") or []],
            status=data.get("status") or "",
            tagline=data.get("tagline") or "",
            type=data.get("type") or "",
            last_air_date=data.get("last_air_date") or "",
            homepage=data.get("homepage") or "",
            in_production=data.get("in_production", False),
            networks=_names(data.get("networks")),
        )


@dataclass
class CastMember:
    """Cast entry from a credits response."""

    id: int
    name: str
    character: str = ""
    order: int = 999
    profile_path: Optional[str] = None

    @classmethod
    def from_tmdb(cls, data: dict) -> "CastMember":
        return cls(
            id=data.get("id"),
            name=data.get("name", "Unknown"),
            character=data.get("character") or "",
            order=data.get("order", 999),
            profile_path=data.get("profile_path"),
        )


@dataclass
class CrewMember:
    """Crew entry from a credits response."""

    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: Optional[str] = None

    @classmethod
    def from_tmdb(cls, data: dict) -> "CrewMember":
        return cls(
            id=data.get("id"),
            name=data.get("name", "Unknown"),
            job=data.get("job") or "",
            department=data.get("department") or "",
            profile_path=data.get("profile_path"),
        )


@dataclass
class Credits:
    """Cast and crew for a movie or series."""

    id: int
    cast: List[CastMember] = field(default_factory=list)
    crew: List[CrewMember] = field(default_factory=list)

    def get_directors(self) -> List[CrewMember]:
        return [c for c in self.crew if c.job == "Director"]

    def top_cast(self, limit: int = 5) -> List[CastMember]:
        return sorted(self.cast, key=lambda c: c.order)[:limit]

    @classmethod
    def from_tmdb(cls, data: dict) -> "Credits":
        return cls(
            id=data.get("id"),
            cast=[CastMember.from_tmdb(c) for c in data.get("cast") or []],
            crew=[CrewMember.from_tmdb(c) for c in data.get("crew") or []],
        )


@dataclass
class Video:
    """Video (trailer, teaser, clip) attached to a title."""

    id: str
    key: str
    name: str
    site: str
    type: str
    official: bool = False
    published_at: str = ""

    @property
    def url(self) -> Optional[str]:
        if self.site == "YouTube":
            return f"https://www.youtube.com/watch?v={self.key}"
        return None

    @classmethod
    def from_tmdb(cls, data: dict) -> "Video":
        return cls(
            id=data.get("id", ""),
            key=data.get("key", ""),
            name=data.get("name", ""),
            site=data.get("site", ""),
            type=data.get("type", ""),
            official=data.get("official", False),
            published_at=data.get("published_at") or "",
        )


def find_trailer(videos: List[Video]) -> Optional[Video]:
    """
    Pick the video to play for a title.

    Prefers a YouTube trailer, then any trailer, then the first video.
    Returns None when there are no videos at all.
    """
    for video in videos:
        if video.type == "Trailer" and video.site == "YouTube":
            return video
    for video in videos:
        if video.type == "Trailer":
            return video
    return videos[0] if videos else None


@dataclass
class Review:
    """User review of a title."""

    id: str
    author: str
    content: str
    rating: Optional[float] = None
    created_at: str = ""
    url: str = ""

    @classmethod
    def from_tmdb(cls, data: dict) -> "Review":
        details = data.get("author_details") or {}
        return cls(
            id=data.get("id", ""),
            author=data.get("author", ""),
            content=data.get("content", ""),
            rating=details.get("rating"),
            created_at=data.get("created_at") or "",
            url=data.get("url") or "",
        )


@dataclass
class PagedResult:
    """One page of a list/search response."""

    page: int = 1
    results: list = field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0

    @classmethod
    def from_tmdb(cls, data: dict, parse=None) -> "PagedResult":
        results = data.get("results") or []
        if parse is not None:
            results = [parse(r) for r in results]
        return cls(
            page=data.get("page", 1),
            results=results,
            total_pages=data.get("total_pages", 0),
            total_results=data.get("total_results", 0),
        )


Record = Union[Movie, TVSeries]


def record_parser(media_type: MediaType):
    """Return the list-record parser for a media type."""
    return Movie.from_tmdb if media_type == MediaType.MOVIE else TVSeries.from_tmdb


def details_parser(media_type: MediaType):
    """Return the details parser for a media type."""
    return MovieDetails.from_tmdb if media_type == MediaType.MOVIE else TVSeriesDetails.from_tmdb


@dataclass
class SavedItem:
    """A favorites/watchlist entry: the stored record plus its insertion time."""

    media_type: MediaType
    item: Record
    added_at: str
    data: dict = field(default_factory=dict, repr=False)

    @property
    def id(self) -> int:
        return self.item.id

    @property
    def title(self) -> str:
        return self.item.display_title

    def to_dict(self) -> dict:
        """Stored record shape (original fields plus addedAt)."""
        return dict(self.data)

    @classmethod
    def from_document(cls, media_type: MediaType, data: dict) -> "SavedItem":
        return cls(
            media_type=media_type,
            item=record_parser(media_type)(data),
            added_at=data.get("addedAt", ""),
            data=dict(data),
        )
