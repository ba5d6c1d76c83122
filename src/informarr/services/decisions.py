"""
Notification decisions for download events.

Given a pending request and the current state of its seasons, decide which
notification (if any) to send and whether the request is satisfied.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from informarr.apis.sonarr_api import SonarrSeason
from informarr.media.request import PendingRequest
from informarr.services.availability import classify_seasons, match_requested


class RequestLookupError(Exception):
    """A value needed to process an event is missing upstream"""


@dataclass(frozen=True)
class MediaAvailable:
    request: PendingRequest
    seasons: tuple[int, ...] = ()


@dataclass(frozen=True)
class OngoingSeasonAvailable:
    """Episodes 1 to `episode_number` of an airing season are downloaded."""

    request: PendingRequest
    season_number: int
    episode_number: int


@dataclass(frozen=True)
class OngoingEpisodeAvailable:
    """The newest episode of an airing season is downloaded."""

    request: PendingRequest
    season_number: int
    episode_number: int


Notification = MediaAvailable | OngoingSeasonAvailable | OngoingEpisodeAvailable


@dataclass(frozen=True)
class Decision:
    notification: Notification | None = None
    remove: bool = False


NO_OP = Decision()


def decide_movie(request: PendingRequest) -> Decision:
    """A first download of a requested movie always satisfies the request."""

    return Decision(MediaAvailable(request), remove=True)


def decide_series(
    request: PendingRequest,
    event_seasons: Iterable[int],
    monitored: Iterable[SonarrSeason],
) -> Decision:
    """
    Decide what a download of `event_seasons` means for `request`.

    The request is satisfied once every requested season that finished airing
    is fully downloaded and no requested season is still airing. Otherwise,
    when the download touched the first airing season and all of its aired
    episodes are present, the requester hears about the new episode, or about
    the whole backlog when they requested after the latest episode aired.

    Raises:
        RequestLookupError: If the airing season has no previous air date.
    """

    requested = set(request.requested_seasons or ())
    event_seasons = set(event_seasons)

    if not requested & event_seasons:
        logger.debug(f"Download did not touch a requested season of {request.log_string}")
        return NO_OP

    partition = classify_seasons(monitored)
    availability = match_requested(partition, requested)

    # An airing requested season keeps the request open
    if availability.is_fully_available and not set(partition.ongoing) & requested:
        return Decision(
            MediaAvailable(request, availability.available_requested), remove=True
        )

    ongoing_requested = set(partition.ongoing) & requested & event_seasons

    if not ongoing_requested:
        logger.debug(f"No airing season of {request.log_string} to update")
        return NO_OP

    first_ongoing = partition.first_ongoing

    if first_ongoing.season_number != min(ongoing_requested):
        logger.debug(
            f"Season {min(ongoing_requested)} of {request.log_string} is not the first airing season"
        )
        return NO_OP

    if (
        not first_ongoing.aired_episode_count
        or first_ongoing.downloaded_episode_count != first_ongoing.aired_episode_count
    ):
        logger.debug(f"Aired episodes of {request.log_string} are still missing")
        return NO_OP

    if first_ongoing.last_downloaded_air_date is None:
        raise RequestLookupError(
            f"No previous air date for season {first_ongoing.season_number} of {request.log_string}"
        )

    season_number = first_ongoing.season_number
    episode_number = first_ongoing.aired_episode_count

    if (
        first_ongoing.last_downloaded_air_date > request.created_at
        or episode_number == 1
    ):
        return Decision(OngoingEpisodeAvailable(request, season_number, episode_number))

    return Decision(OngoingSeasonAvailable(request, season_number, episode_number))
