"""
Static fixture data source.

Answers the same endpoints as the live client from a small canned
dataset, for running without an API key and for demos.
"""

import re
from typing import List, Optional

from .exceptions import TMDBError

PAGE_SIZE = 20

FIXTURE_MOVIES: List[dict] = [
    {
        "id": 550, "title": "Fight Club", "original_title": "Fight Club",
        "overview": "An insomniac office worker and a soap maker form an underground fight club.",
        "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg", "backdrop_path": "/hZkgoQYus5vegHoetLkCJzb17zJ.jpg",
        "release_date": "1999-10-15", "vote_average": 8.4, "vote_count": 29000, "adult": False,
        "genre_ids": [18, 53], "original_language": "en", "popularity": 61.4, "video": False,
    },
    {
        "id": 27205, "title": "Inception", "original_title": "Inception",
        "overview": "A thief who steals corporate secrets through dream-sharing technology.",
        "poster_path": "/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg", "backdrop_path": "/8ZTVqvKDQ8emSGUEMjsS4yHAwrp.jpg",
        "release_date": "2010-07-15", "vote_average": 8.4, "vote_count": 36000, "adult": False,
        "genre_ids": [28, 878, 12], "original_language": "en", "popularity": 92.1, "video": False,
    },
    {
        "id": 155, "title": "The Dark Knight", "original_title": "The Dark Knight",
        "overview": "Batman raises the stakes in his war on crime.",
        "poster_path": "/qJ2tW6WMUDux911r6m7haRef0WH.jpg", "backdrop_path": "/nMKdUUepR0i5zn0y1T4CsSB5chy.jpg",
        "release_date": "2008-07-16", "vote_average": 8.5, "vote_count": 32000, "adult": False,
        "genre_ids": [18, 28, 80, 53], "original_language": "en", "popularity": 110.3, "video": False,
    },
    {
        "id": 680, "title": "Pulp Fiction", "original_title": "Pulp Fiction",
        "overview": "The lives of two mob hitmen, a boxer and a pair of diner bandits intertwine.",
        "poster_path": "/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg", "backdrop_path": "/suaEOtk1N1sgg2MTM7oZd2cfVp3.jpg",
        "release_date": "1994-09-10", "vote_average": 8.5, "vote_count": 27000, "adult": False,
        "genre_ids": [53, 80], "original_language": "en", "popularity": 70.2, "video": False,
    },
    {
        "id": 157336, "title": "Interstellar", "original_title": "Interstellar",
        "overview": "Explorers travel through a wormhole in space to ensure humanity's survival.",
        "poster_path": "/gEU2QniE6E77NI6lCU6MxlNBvIx.jpg", "backdrop_path": "/xJHokMbljvjADYdit5fK5VQsXEG.jpg",
        "release_date": "2014-11-05", "vote_average": 8.4, "vote_count": 34000, "adult": False,
        "genre_ids": [12, 18, 878], "original_language": "en", "popularity": 140.7, "video": False,
    },
    {
        "id": 129, "title": "Spirited Away", "original_title": "千と千尋の神隠し",
        "overview": "A young girl wanders into a world ruled by gods, witches and spirits.",
        "poster_path": "/39wmItIWsg5sZMyRUHLkWBcuVCM.jpg", "backdrop_path": "/Ab8mkHmkYADjU7wQiOkia9BzGvS.jpg",
        "release_date": "2001-07-20", "vote_average": 8.5, "vote_count": 16000, "adult": False,
        "genre_ids": [16, 10751, 14], "original_language": "ja", "popularity": 85.9, "video": False,
    },
]

FIXTURE_TV_SERIES: List[dict] = [
    {
        "id": 1396, "name": "Breaking Bad", "original_name": "Breaking Bad",
        "overview": "A chemistry teacher diagnosed with cancer turns to manufacturing meth.",
        "poster_path": "/ztkUQFLlC19CCMYHW9o1zWhJRNq.jpg", "backdrop_path": "/tsRy63Mu5cu8etL1X7ZLyf7UP1M.jpg",
        "first_air_date": "2008-01-20", "vote_average": 8.9, "vote_count": 14000,
        "genre_ids": [18, 80], "original_language": "en", "popularity": 300.5, "origin_country": ["US"],
    },
    {
        "id": 1399, "name": "Game of Thrones", "original_name": "Game of Thrones",
        "overview": "Nine noble families wage war against each other to gain control of Westeros.",
        "poster_path": "/1XS1oqL89opfnbLl8WnZY1O1uJx.jpg", "backdrop_path": "/2OMB0ynKlyIenMJWI2Dy9IWT4c.jpg",
        "first_air_date": "2011-04-17", "vote_average": 8.4, "vote_count": 24000,
        "genre_ids": [10765, 18, 10759], "original_language": "en", "popularity": 450.2, "origin_country": ["US"],
    },
    {
        "id": 66732, "name": "Stranger Things", "original_name": "Stranger Things",
        "overview": "When a young boy vanishes, a small town uncovers a mystery involving secret experiments.",
        "poster_path": "/49WJfeN0moxb9IPfGn8AIqMGskD.jpg", "backdrop_path": "/56v2KjBlU4XaOv9rVYEQypROD7P.jpg",
        "first_air_date": "2016-07-15", "vote_average": 8.6, "vote_count": 18000,
        "genre_ids": [10765, 9648, 18], "original_language": "en", "popularity": 280.9, "origin_country": ["US"],
    },
    {
        "id": 94605, "name": "Arcane", "original_name": "Arcane",
        "overview": "Amid the stark discord of twin cities Piltover and Zaun, two sisters fight on rival sides.",
        "poster_path": "/fqldf2t8ztc9aiwn3k6mlX3tvRT.jpg", "backdrop_path": "/rkB4LyZHo1NHXFEDHl9vSD9r1lI.jpg",
        "first_air_date": "2021-11-06", "vote_average": 8.7, "vote_count": 4500,
        "genre_ids": [16, 10765, 10759], "original_language": "en", "popularity": 150.4, "origin_country": ["US"],
    },
]

FIXTURE_GENRES = {
    12: "Adventure", 14: "Fantasy", 16: "Animation", 18: "Drama", 28: "Action",
    53: "Thriller", 80: "Crime", 878: "Science Fiction", 9648: "Mystery",
    10751: "Family", 10759: "Action & Adventure", 10765: "Sci-Fi & Fantasy",
}


def paged_response(items: List[dict], page: int = 1, page_size: int = PAGE_SIZE) -> dict:
    """Slice items into one TMDB-shaped page."""
    total_results = len(items)
    total_pages = (total_results + page_size - 1) // page_size if total_results else 0
    start = (page - 1) * page_size
    return {
        "page": page,
        "results": items[start:start + page_size],
        "total_pages": total_pages,
        "total_results": total_results,
    }


def _genres(ids: List[int]) -> List[dict]:
    return [{"id": gid, "name": FIXTURE_GENRES.get(gid, "Unknown")} for gid in ids]


def movie_details(movie: dict) -> dict:
    details = dict(movie)
    details.update({
        "genres": _genres(movie["genre_ids"]),
        "runtime": 120,
        "budget": 0,
        "revenue": 0,
        "homepage": "",
        "imdb_id": None,
        "status": "Released",
        "tagline": "",
        "production_companies": [],
        "spoken_languages": [],
    })
    return details


def tv_details(series: dict) -> dict:
    seasons = [
        {
            "id": series["id"] * 100 + n, "name": f"Season {n}", "season_number": n,
            "episode_count": 8, "air_date": series["first_air_date"], "overview": "", "poster_path": None,
        }
        for n in (1, 2)
    ]
    details = dict(series)
    details.update({
        "genres": _genres(series["genre_ids"]),
        "episode_run_time": [50],
        "number_of_episodes": 16,
        "number_of_seasons": len(seasons),
        "seasons": seasons,
        "status": "Returning Series",
        "tagline": "",
        "type": "Scripted",
        "last_air_date": series["first_air_date"],
        "homepage": "",
        "in_production": True,
        "networks": [],
    })
    return details


def season_details(tv_id: int, season_number: int) -> dict:
    episodes = [
        {
            "id": tv_id * 10000 + season_number * 100 + n, "name": f"Episode {n}",
            "episode_number": n, "season_number": season_number, "overview": "",
            "air_date": "", "runtime": 50, "vote_average": 0.0, "vote_count": 0, "still_path": None,
        }
        for n in range(1, 9)
    ]
    return {
        "id": tv_id * 100 + season_number,
        "name": f"Season {season_number}",
        "season_number": season_number,
        "air_date": "",
        "overview": "",
        "poster_path": None,
        "episodes": episodes,
    }


class FixtureClient:
    """
    Data source that serves the canned dataset.

    Mirrors the endpoint routing of the live API closely enough for the
    catalog, search, details and list flows to run end to end.
    """

    def __init__(
        self,
        movies: Optional[List[dict]] = None,
        tv_series: Optional[List[dict]] = None,
    ):
        self.movies = list(movies if movies is not None else FIXTURE_MOVIES)
        self.tv_series = list(tv_series if tv_series is not None else FIXTURE_TV_SERIES)
        self._routes = self._build_routes()

    def _build_routes(self) -> List[tuple]:
        by_rating = lambda items: sorted(items, key=lambda i: i["vote_average"], reverse=True)
        by_popularity = lambda items: sorted(items, key=lambda i: i["popularity"], reverse=True)
        return [
            (r"^/movie/popular$", lambda m, p: paged_response(self.movies, p)),
            (r"^/movie/top_rated$", lambda m, p: paged_response(by_rating(self.movies), p)),
            (r"^/movie/now_playing$", lambda m, p: paged_response(self.movies, p)),
            (r"^/movie/upcoming$", lambda m, p: paged_response(self.movies, p)),
            (r"^/trending/movie/(day|week)$", lambda m, p: paged_response(by_popularity(self.movies), p)),
            (r"^/tv/popular$", lambda m, p: paged_response(self.tv_series, p)),
            (r"^/tv/top_rated$", lambda m, p: paged_response(by_rating(self.tv_series), p)),
            (r"^/tv/on_the_air$", lambda m, p: paged_response(self.tv_series, p)),
            (r"^/tv/airing_today$", lambda m, p: paged_response(self.tv_series, p)),
            (r"^/trending/tv/(day|week)$", lambda m, p: paged_response(by_popularity(self.tv_series), p)),
            (r"^/search/movie$", lambda m, p: paged_response(self.movies, p)),
            (r"^/search/tv$", lambda m, p: paged_response(self.tv_series, p)),
            (r"^/movie/(\d+)$", lambda m, p: movie_details(self._find(self.movies, m.group(1)))),
            (r"^/tv/(\d+)$", lambda m, p: tv_details(self._find(self.tv_series, m.group(1)))),
            (r"^/tv/(\d+)/season/(\d+)$", lambda m, p: self._season(m)),
            (r"^/(movie|tv)/(\d+)/credits$", lambda m, p: self._credits(m)),
            (r"^/(movie|tv)/(\d+)/videos$", lambda m, p: self._videos(m)),
            (r"^/(movie|tv)/(\d+)/reviews$", lambda m, p: {"id": int(m.group(2)), **paged_response([], p)}),
            (r"^/movie/(\d+)/(similar|recommendations)$",
             lambda m, p: paged_response([x for x in self.movies if x["id"] != int(m.group(1))], p)),
            (r"^/tv/(\d+)/(similar|recommendations)$",
             lambda m, p: paged_response([x for x in self.tv_series if x["id"] != int(m.group(1))], p)),
        ]

    @staticmethod
    def _find(items: List[dict], raw_id: str) -> dict:
        item_id = int(raw_id)
        for item in items:
            if item["id"] == item_id:
                return item
        raise TMDBError.from_response(404, "The resource you requested could not be found.")

    def _season(self, match) -> dict:
        tv_id = int(match.group(1))
        self._find(self.tv_series, match.group(1))
        return season_details(tv_id, int(match.group(2)))

    def _credits(self, match) -> dict:
        item_id = int(match.group(2))
        return {
            "id": item_id,
            "cast": [
                {"id": item_id * 10 + 1, "name": "Lead Actor", "character": "Protagonist", "order": 0,
                 "profile_path": None},
                {"id": item_id * 10 + 2, "name": "Supporting Actor", "character": "Sidekick", "order": 1,
                 "profile_path": None},
            ],
            "crew": [
                {"id": item_id * 10 + 3, "name": "The Director", "job": "Director",
                 "department": "Directing", "profile_path": None},
            ],
        }

    def _videos(self, match) -> dict:
        item_id = int(match.group(2))
        return {
            "id": item_id,
            "results": [
                {"id": f"v{item_id}", "key": f"trailer{item_id}", "name": "Official Trailer",
                 "site": "YouTube", "type": "Trailer", "official": True, "published_at": ""},
            ],
        }

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """Answer an endpoint from the fixtures; unknown endpoints get an empty page."""
        params = params or {}
        page = int(params.get("page", 1) or 1)
        path = endpoint.split("?", 1)[0]

        for pattern, handler in self._routes:
            match = re.match(pattern, path)
            if match:
                return handler(match, page)

        return paged_response([], page)

    def test_connection(self) -> bool:
        return True
