"""Season availability classification"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from informarr.apis.sonarr_api import SonarrSeason


@dataclass(frozen=True)
class SeasonAvailability:
    season_number: int
    is_ongoing: bool
    is_fully_downloaded: bool
    downloaded_episode_count: int
    aired_episode_count: int
    total_episode_count: int
    last_downloaded_air_date: datetime | None


def season_availability(season: SonarrSeason) -> SeasonAvailability:
    stats = season.statistics

    if stats is None:
        return SeasonAvailability(
            season_number=season.season_number,
            is_ongoing=False,
            is_fully_downloaded=False,
            downloaded_episode_count=0,
            aired_episode_count=0,
            total_episode_count=0,
            last_downloaded_air_date=None,
        )

    return SeasonAvailability(
        season_number=season.season_number,
        is_ongoing=stats.next_airing is not None,
        is_fully_downloaded=stats.episode_file_count == stats.total_episode_count,
        downloaded_episode_count=stats.episode_file_count,
        aired_episode_count=stats.episode_count,
        total_episode_count=stats.total_episode_count,
        last_downloaded_air_date=stats.previous_airing,
    )


@dataclass
class SeasonPartition:
    """Monitored seasons split by airing and download state, keyed by season number."""

    available: dict[int, SeasonAvailability] = field(default_factory=dict)
    completed_incomplete: dict[int, SeasonAvailability] = field(default_factory=dict)
    ongoing: dict[int, SeasonAvailability] = field(default_factory=dict)

    @property
    def finished_airing(self) -> set[int]:
        return set(self.available) | set(self.completed_incomplete)

    @property
    def first_ongoing(self) -> SeasonAvailability | None:
        if not self.ongoing:
            return None
        return self.ongoing[min(self.ongoing)]


@dataclass(frozen=True)
class RequestedAvailability:
    available_requested: tuple[int, ...]
    completed_requested: tuple[int, ...]

    @property
    def is_fully_available(self) -> bool:
        """Every requested season that finished airing is also fully downloaded."""
        return bool(self.completed_requested) and (
            self.completed_requested == self.available_requested
        )


def classify_seasons(seasons: Iterable[SonarrSeason]) -> SeasonPartition:
    """
    Partition monitored seasons into available, completed-but-incomplete and ongoing.

    A season with an upcoming airing is ongoing whatever its file counts are.
    Seasons Sonarr reports no statistics for are left out.
    """

    partition = SeasonPartition()

    for season in seasons:
        if season.statistics is None:
            continue

        availability = season_availability(season)

        if availability.is_ongoing:
            partition.ongoing[season.season_number] = availability
        elif availability.is_fully_downloaded:
            partition.available[season.season_number] = availability
        else:
            partition.completed_incomplete[season.season_number] = availability

    return partition


def match_requested(
    partition: SeasonPartition, requested: Iterable[int]
) -> RequestedAvailability:
    requested_seasons = set(requested)

    return RequestedAvailability(
        available_requested=tuple(sorted(set(partition.available) & requested_seasons)),
        completed_requested=tuple(
            sorted(partition.finished_airing & requested_seasons)
        ),
    )
