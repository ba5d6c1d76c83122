from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from informarr.apis.seerr_api import (
    SeerrAPIError,
    SeerrMediaRequest,
    SeerrMovieDetails,
    SeerrRequestCount,
    SeerrTvDetails,
    SeerrUser,
)
from informarr.media.request import MediaIdentifiers, MediaType, RequestedBy
from informarr.services.content.seerr import Seerr
from informarr.services.decisions import RequestLookupError


def tv_request_payload(request_id=1, status=3, seasons=(1, 2), created_at="2024-03-01T12:00:00.000Z"):
    return SeerrMediaRequest.model_validate(
        {
            "id": request_id,
            "status": 2,
            "type": "tv",
            "createdAt": created_at,
            "media": {"id": 10, "tmdbId": 1399, "tvdbId": 121361, "status": status},
            "requestedBy": {"id": 5},
            "seasons": [{"seasonNumber": n} for n in seasons],
        }
    )


def movie_request_payload(request_id=2, status=3):
    return SeerrMediaRequest.model_validate(
        {
            "id": request_id,
            "type": "movie",
            "createdAt": "2024-03-01T12:00:00Z",
            "media": {"tmdbId": 603, "tvdbId": 0, "status": status},
            "requestedBy": {"id": 5},
        }
    )


@pytest.fixture
def api():
    api = Mock()
    api.get_user.return_value = SeerrUser.model_validate(
        {"id": 5, "displayName": "", "username": None, "jellyfinUsername": "alice", "settings": {"discordId": "1234"}}
    )
    api.get_tv.return_value = SeerrTvDetails.model_validate(
        {
            "id": 1399,
            "name": "Game of Thrones",
            "overview": "Winter is coming.",
            "posterPath": "/got.jpg",
            "mediaInfo": {"seasons": [{"seasonNumber": 1, "status": 5}, {"seasonNumber": 2, "status": 3}]},
        }
    )
    api.get_movie.return_value = SeerrMovieDetails.model_validate(
        {"id": 603, "title": None, "originalTitle": "The Matrix", "overview": "Red pill.", "posterPath": None}
    )
    return api


@pytest.fixture
def seerr(api):
    return Seerr(api=api)


def test_builds_tv_request(seerr, api):
    request = seerr.build_request(tv_request_payload())

    assert request.media_type == MediaType.TV
    assert request.ids == MediaIdentifiers(1399, 121361)
    assert request.title == "Game of Thrones"
    assert request.overview == "Winter is coming."
    assert request.requested_seasons == (1, 2)
    assert request.requested_by == RequestedBy("alice", "1234")
    assert request.created_at == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert request.image_url == "https://image.tmdb.org/t/p/w600_and_h900_bestv2/got.jpg"
    api.get_tv.assert_called_once_with(1399)


def test_tv_request_with_every_season_available_is_skipped(seerr):
    assert seerr.build_request(tv_request_payload(seasons=(1,))) is None


def test_available_media_is_skipped(seerr, api):
    assert seerr.build_request(tv_request_payload(status=5)) is None
    api.get_user.assert_not_called()


def test_builds_movie_request(seerr):
    request = seerr.build_request(movie_request_payload())

    assert request.media_type == MediaType.Movie
    assert request.ids == MediaIdentifiers(603, None)
    assert request.title == "The Matrix"
    assert request.requested_seasons is None
    assert request.image_url is None


def test_user_without_any_name_is_a_lookup_error(seerr, api):
    api.get_user.return_value = SeerrUser(id=5)

    with pytest.raises(RequestLookupError):
        seerr.build_request(movie_request_payload())


def test_request_without_creation_time_is_a_lookup_error(seerr):
    payload = movie_request_payload()
    payload.created_at = None

    with pytest.raises(RequestLookupError):
        seerr.build_request(payload)


def test_get_request_fetches_by_id(seerr, api):
    api.get_request.return_value = movie_request_payload(request_id=44)

    request = seerr.get_request(44)

    api.get_request.assert_called_once_with(44)
    assert request.title == "The Matrix"


def test_fetch_approved_pages_through_requests(seerr, api):
    api.get_request_count.return_value = SeerrRequestCount(approved=150)
    api.get_requests.side_effect = [
        [tv_request_payload(request_id=n) for n in range(100)],
        [movie_request_payload(request_id=100)],
    ]

    requests = seerr.fetch_approved()

    assert [c.kwargs for c in api.get_requests.call_args_list] == [
        {"take": 100, "skip": 0, "filter": "approved"},
        {"take": 100, "skip": 100, "filter": "approved"},
    ]
    assert len(requests) == 101


def test_fetch_approved_skips_requests_that_fail(seerr, api):
    api.get_request_count.return_value = SeerrRequestCount(approved=2)
    api.get_requests.return_value = [tv_request_payload(request_id=1), movie_request_payload(request_id=2)]
    api.get_tv.side_effect = SeerrAPIError("show gone")

    requests = seerr.fetch_approved()

    assert [r.media_type for r in requests] == [MediaType.Movie]


def test_fetch_approved_raises_when_listing_fails(seerr, api):
    api.get_request_count.side_effect = SeerrAPIError("portal down")

    with pytest.raises(SeerrAPIError):
        seerr.fetch_approved()
