"""Seerr content module"""

from kink import di
from loguru import logger

from informarr.apis.seerr_api import (
    MediaStatus,
    SeerrAPI,
    SeerrAPIError,
    SeerrMediaRequest,
)
from informarr.media.request import (
    MediaIdentifiers,
    MediaType,
    PendingRequest,
    RequestedBy,
)
from informarr.services.decisions import RequestLookupError
from informarr.settings import settings_manager


class Seerr:
    """Turns request portal requests into pending requests"""

    PAGE_SIZE = 100

    def __init__(self, api: SeerrAPI | None = None):
        self.key = "seerr"
        self.settings = settings_manager.settings.seerr
        self.api = api or di[SeerrAPI]

    def validate(self) -> bool:
        if self.settings.api_key == "":
            logger.error("Seerr API key is not set.")
            return False

        return self.api.validate()

    def get_request(self, request_id: int) -> PendingRequest | None:
        """
        Fetch a single request and normalize it.

        Returns None when the media is already available or nothing requested is missing.

        Raises:
            SeerrAPIError: If the portal could not be queried.
            RequestLookupError: If the request lacks data needed to track it.
        """

        return self.build_request(self.api.get_request(request_id))

    def fetch_approved(self) -> list[PendingRequest]:
        """
        Fetch every approved request that still waits for media.

        Requests that cannot be normalized are logged and skipped; failing to
        list the requests at all raises.

        Raises:
            SeerrAPIError: If the request count or a page of requests could not be fetched.
        """

        total = self.api.get_request_count().approved
        pending: list[PendingRequest] = []

        for skip in range(0, total, self.PAGE_SIZE):
            for media_request in self.api.get_requests(
                take=self.PAGE_SIZE, skip=skip, filter="approved"
            ):
                try:
                    request = self.build_request(media_request)
                except (RequestLookupError, SeerrAPIError) as e:
                    logger.error(f"Skipping request {media_request.id}: {e}")
                    continue

                if request:
                    pending.append(request)

        logger.log("SEERR", f"Fetched {len(pending)} pending of {total} approved requests")
        return pending

    def build_request(self, media_request: SeerrMediaRequest) -> PendingRequest | None:
        media = media_request.media

        if not media_request.type:
            raise RequestLookupError(f"Request {media_request.id} has no media type")

        if not media:
            raise RequestLookupError(f"Request {media_request.id} has no media")

        if media.status == MediaStatus.AVAILABLE:
            logger.debug(f"Media of request {media_request.id} is already available")
            return None

        if not media.tmdb_id:
            raise RequestLookupError(f"Request {media_request.id} has no TMDB id")

        if not media_request.created_at:
            raise RequestLookupError(f"Request {media_request.id} has no creation time")

        requested_by = self._get_requested_by(media_request)
        ids = MediaIdentifiers(media.tmdb_id, media.tvdb_id)

        if media_request.type == MediaType.TV:
            show = self.api.get_tv(media.tmdb_id)
            requested_seasons = tuple(s.season_number for s in media_request.seasons)
            missing = set(requested_seasons) - show.available_seasons

            if not missing:
                logger.debug(f"Requested seasons of {show.name} are already available")
                return None

            return PendingRequest(
                media_type=MediaType.TV,
                ids=ids,
                title=show.name or show.original_name or "",
                overview=show.overview or "",
                created_at=media_request.created_at,
                requested_by=requested_by,
                image_url=self._image_url(show.poster_path),
                requested_seasons=requested_seasons,
            )

        movie = self.api.get_movie(media.tmdb_id)

        return PendingRequest(
            media_type=MediaType.Movie,
            ids=ids,
            title=movie.title or movie.original_title or "",
            overview=movie.overview or "",
            created_at=media_request.created_at,
            requested_by=requested_by,
            image_url=self._image_url(movie.poster_path),
        )

    def _get_requested_by(self, media_request: SeerrMediaRequest) -> RequestedBy:
        if not media_request.requested_by:
            raise RequestLookupError(f"Request {media_request.id} has no requester")

        user = self.api.get_user(media_request.requested_by.id)

        if not user.name:
            raise RequestLookupError(f"User {user.id} has no display name")

        return RequestedBy(display_name=user.name, discord_id=user.discord_id)

    def _image_url(self, poster_path: str | None) -> str | None:
        if not poster_path:
            return None

        base_url = settings_manager.settings.notifications.image_base_url
        return f"{base_url.rstrip('/')}/{poster_path.lstrip('/')}"
