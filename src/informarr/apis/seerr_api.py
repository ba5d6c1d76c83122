"""Overseerr/Jellyseerr API client"""

from datetime import datetime
from enum import IntEnum
from typing import Literal

from loguru import logger
from pydantic import ValidationError
from requests import Response
from requests.exceptions import RequestException

from informarr.apis.models import ApiModel
from informarr.utils.request import SmartSession, get_hostname_from_url


class SeerrAPIError(Exception):
    """Base exception for SeerrAPI related errors"""


class MediaStatus(IntEnum):
    UNKNOWN = 1
    PENDING = 2
    PROCESSING = 3
    PARTIALLY_AVAILABLE = 4
    AVAILABLE = 5
    BLACKLISTED = 6
    DELETED = 7


class SeerrUserSettings(ApiModel):
    discord_id: str | None = None


class SeerrUser(ApiModel):
    id: int
    display_name: str | None = None
    username: str | None = None
    jellyfin_username: str | None = None
    plex_username: str | None = None
    settings: SeerrUserSettings | None = None

    @property
    def name(self) -> str | None:
        """Best available display name."""
        return (
            self.display_name
            or self.username
            or self.jellyfin_username
            or self.plex_username
        )

    @property
    def discord_id(self) -> str | None:
        return (self.settings and self.settings.discord_id) or None


class SeerrSeason(ApiModel):
    season_number: int
    status: int | None = None


class SeerrMedia(ApiModel):
    id: int | None = None
    tmdb_id: int | None = None
    tvdb_id: int | None = None
    status: int = MediaStatus.UNKNOWN
    seasons: list[SeerrSeason] = []


class SeerrMediaRequest(ApiModel):
    id: int
    status: int | None = None
    type: Literal["movie", "tv"] | None = None
    media: SeerrMedia | None = None
    created_at: datetime | None = None
    requested_by: SeerrUser | None = None
    seasons: list[SeerrSeason] = []


class SeerrRequestCount(ApiModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    processing: int = 0
    available: int = 0


class SeerrPageInfo(ApiModel):
    pages: int = 0
    page_size: int = 0
    results: int = 0
    page: int = 0


class SeerrRequestPage(ApiModel):
    page_info: SeerrPageInfo | None = None
    results: list[SeerrMediaRequest] = []


class SeerrMediaInfo(ApiModel):
    status: int | None = None
    seasons: list[SeerrSeason] = []


class SeerrTvDetails(ApiModel):
    id: int
    name: str | None = None
    original_name: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    media_info: SeerrMediaInfo | None = None

    @property
    def available_seasons(self) -> set[int]:
        if not self.media_info:
            return set()
        return {
            season.season_number
            for season in self.media_info.seasons
            if season.status == MediaStatus.AVAILABLE
        }


class SeerrMovieDetails(ApiModel):
    id: int
    title: str | None = None
    original_title: str | None = None
    overview: str | None = None
    poster_path: str | None = None


class SeerrArrSettings(ApiModel):
    hostname: str
    port: int
    api_key: str
    use_ssl: bool = False
    base_url: str | None = None

    @property
    def url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.hostname}:{self.port}{(self.base_url or '').rstrip('/')}"


class SeerrAPI:
    """Handles Overseerr/Jellyseerr API communication"""

    def __init__(self, api_key: str, base_url: str):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

        self.session = SmartSession(
            base_url=f"{self.base_url}/api/v1",
            rate_limits={
                # 1000 calls per 5 minutes
                get_hostname_from_url(self.base_url): {
                    "rate": 1000 // 300,
                    "capacity": 1000,
                }
            },
        )

        self.session.headers.update({"X-Api-Key": self.api_key})

    def validate(self) -> bool:
        """Validate API connection"""

        try:
            return self.session.get("auth/me", timeout=15).ok
        except RequestException as e:
            logger.error(f"Request portal is not reachable, or it timed out: {e}")

        return False

    def _get(self, path: str, **kwargs) -> Response:
        try:
            response = self.session.get(path, **kwargs)
        except RequestException as e:
            raise SeerrAPIError(f"GET {path} failed: {e}") from e

        if not response.ok:
            raise SeerrAPIError(
                f"GET {path} returned {response.status_code}: {response.text[:200]}"
            )

        return response

    def _parse(self, model: type[ApiModel], response: Response, what: str):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SeerrAPIError(f"Could not parse {what}: {e}") from e

    def get_request(self, request_id: int | str) -> SeerrMediaRequest:
        return self._parse(
            SeerrMediaRequest, self._get(f"request/{request_id}"), f"request {request_id}"
        )

    def get_request_count(self) -> SeerrRequestCount:
        return self._parse(SeerrRequestCount, self._get("request/count"), "request count")

    def get_requests(
        self,
        take: int = 100,
        skip: int = 0,
        filter: Literal[
            "all",
            "approved",
            "available",
            "pending",
            "processing",
            "unavailable",
            "failed",
        ] = "approved",
    ) -> list[SeerrMediaRequest]:
        """Get one page of media requests"""

        response = self._get(
            "request", params={"take": take, "skip": skip, "filter": filter}
        )
        page = self._parse(SeerrRequestPage, response, "request page")
        return page.results

    def get_user(self, user_id: int) -> SeerrUser:
        return self._parse(SeerrUser, self._get(f"user/{user_id}"), f"user {user_id}")

    def get_movie(self, tmdb_id: int) -> SeerrMovieDetails:
        return self._parse(
            SeerrMovieDetails, self._get(f"movie/{tmdb_id}"), f"movie {tmdb_id}"
        )

    def get_tv(self, tmdb_id: int) -> SeerrTvDetails:
        return self._parse(SeerrTvDetails, self._get(f"tv/{tmdb_id}"), f"show {tmdb_id}")

    def get_sonarr_settings(self) -> list[SeerrArrSettings]:
        return self._get_arr_settings("sonarr")

    def get_radarr_settings(self) -> list[SeerrArrSettings]:
        return self._get_arr_settings("radarr")

    def _get_arr_settings(self, name: str) -> list[SeerrArrSettings]:
        response = self._get(f"settings/{name}")

        try:
            return [SeerrArrSettings.model_validate(s) for s in response.json()]
        except (ValueError, ValidationError) as e:
            raise SeerrAPIError(f"Could not parse {name} settings: {e}") from e

