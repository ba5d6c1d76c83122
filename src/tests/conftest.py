# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import httpx
import pytest

# Keep settings and logs out of the working tree
os.environ.setdefault("INFORMARR_DATA_DIR", tempfile.mkdtemp(prefix="informarr-tests-"))

from informarr.apis.sonarr_api import SonarrSeason, SonarrSeasonStatistics
from informarr.media.request import (
    MediaIdentifiers,
    MediaType,
    PendingRequest,
    RequestedBy,
)
from informarr.utils.logging import setup_logger

# Setup logger for tests to ensure custom log levels are available
setup_logger("DEBUG")

REQUESTED_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def build_tv_request(
    seasons: Iterable[int] = (1,),
    primary_id: int | None = 1399,
    secondary_id: int | None = 121361,
    created_at: datetime = REQUESTED_AT,
    discord_id: str | None = None,
) -> PendingRequest:
    return PendingRequest(
        media_type=MediaType.TV,
        ids=MediaIdentifiers(primary_id, secondary_id),
        title="Game of Thrones",
        overview="Seven noble families fight for control of Westeros.",
        created_at=created_at,
        requested_by=RequestedBy("alice", discord_id),
        image_url="https://image.tmdb.org/t/p/w600_and_h900_bestv2/got.jpg",
        requested_seasons=tuple(seasons),
    )


def build_movie_request(primary_id: int | None = 603) -> PendingRequest:
    return PendingRequest(
        media_type=MediaType.Movie,
        ids=MediaIdentifiers(primary_id),
        title="The Matrix",
        overview="A hacker learns the truth about his reality.",
        created_at=REQUESTED_AT,
        requested_by=RequestedBy("bob"),
    )


def build_season(
    number: int,
    files: int,
    total: int,
    aired: int | None = None,
    next_airing: datetime | None = None,
    previous_airing: datetime | None = None,
    monitored: bool = True,
) -> SonarrSeason:
    return SonarrSeason(
        season_number=number,
        monitored=monitored,
        statistics=SonarrSeasonStatistics(
            next_airing=next_airing,
            previous_airing=previous_airing,
            episode_file_count=files,
            episode_count=total if aired is None else aired,
            total_episode_count=total,
        ),
    )


@pytest.fixture
def make_tv_request():
    return build_tv_request


@pytest.fixture
def make_movie_request():
    return build_movie_request


@pytest.fixture
def make_season():
    return build_season


@pytest.fixture
def tv_request() -> PendingRequest:
    return build_tv_request()


@pytest.fixture
def movie_request() -> PendingRequest:
    return build_movie_request()


@pytest.fixture
def mock_http() -> Callable[[object, dict], list[httpx.Request]]:
    """
    Route a client's SmartSession through an httpx.MockTransport.

    `routes` maps "METHOD path" (path relative to the host) to a response
    or a callable returning one. Returns the list of requests seen.
    """

    def install(api, routes: dict) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            route = routes.get(f"{request.method} {request.url.path}")

            if route is None:
                return httpx.Response(404, json={"message": "Not mocked"})

            return route(request) if callable(route) else route

        api.session._client = httpx.Client(transport=httpx.MockTransport(handler))
        api.session.retries = 0
        return seen

    return install
