"""Sonarr API client"""

from datetime import datetime

from loguru import logger
from pydantic import ValidationError
from requests.exceptions import RequestException

from informarr.apis.models import ApiModel
from informarr.utils.request import SmartSession


class SonarrAPIError(Exception):
    """Base exception for SonarrAPI related errors"""


class SonarrSeasonStatistics(ApiModel):
    next_airing: datetime | None = None
    previous_airing: datetime | None = None
    episode_file_count: int = 0
    episode_count: int = 0
    total_episode_count: int = 0


class SonarrSeason(ApiModel):
    season_number: int
    monitored: bool = False
    statistics: SonarrSeasonStatistics | None = None


class SonarrSeries(ApiModel):
    id: int
    title: str | None = None
    tvdb_id: int | None = None
    tmdb_id: int | None = None
    seasons: list[SonarrSeason] = []

    @property
    def monitored_seasons(self) -> list[SonarrSeason]:
        return [season for season in self.seasons if season.monitored]


class SonarrAPI:
    """Handles Sonarr API communication"""

    def __init__(self, api_key: str, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.session = SmartSession(base_url=self.base_url, retries=2)
        self.session.headers.update({"X-Api-Key": api_key})

    def validate(self) -> bool:
        """Validate API connection"""

        try:
            return self.session.get("api", timeout=15).ok
        except RequestException as e:
            logger.error(f"Sonarr at {self.base_url} is not reachable: {e}")

        return False

    def get_series(self, series_id: int) -> SonarrSeries:
        """Get a series with its per-season statistics"""

        try:
            response = self.session.get(f"api/v3/series/{series_id}")
        except RequestException as e:
            raise SonarrAPIError(f"Could not reach Sonarr at {self.base_url}: {e}") from e

        if not response.ok:
            raise SonarrAPIError(
                f"Sonarr at {self.base_url} returned {response.status_code} for series {series_id}"
            )

        try:
            return SonarrSeries.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SonarrAPIError(f"Could not parse series {series_id}: {e}") from e
