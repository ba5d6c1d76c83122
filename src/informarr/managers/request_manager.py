from loguru import logger

from informarr.apis.sonarr_api import SonarrAPI, SonarrAPIError, SonarrSeries
from informarr.media.store import PendingRequestStore
from informarr.services.content.seerr import Seerr
from informarr.services.decisions import (
    Decision,
    RequestLookupError,
    decide_movie,
    decide_series,
)
from informarr.services.notifications import NotificationService
from informarr.types import MovieDownload, SeerrApproval, SeriesDownload


class RequestManager:
    """
    Applies approvals, downloads and resyncs to the pending request store.

    Every method runs on the reconciliation loop thread, which makes this the
    only writer of the store. Lookup failures propagate to the caller with the
    store left as it was.
    """

    def __init__(
        self,
        seerr: Seerr,
        sonarr_apis: list[SonarrAPI],
        notifier: NotificationService,
        store: PendingRequestStore | None = None,
    ):
        self.seerr = seerr
        self.sonarr_apis = sonarr_apis
        self.notifier = notifier
        self.store = store if store is not None else PendingRequestStore()

    def handle_approval(self, message: SeerrApproval) -> None:
        request = self.seerr.get_request(message.request_id)

        if request is None:
            logger.debug(f"Request {message.request_id} has nothing left to wait for")
            return

        self.store.upsert(request)

    def handle_series_download(self, message: SeriesDownload) -> None:
        if not message.is_first_acquisition:
            logger.debug("Download is an import completion or upgrade, skipping")
            return

        request = self.store.find_tv(message.ids.primary_id, message.ids.secondary_id)

        if request is None:
            logger.debug(f"No pending request for series {message.ids}")
            return

        series = self._get_series(message.series_id)
        monitored = series.monitored_seasons

        if not monitored:
            raise RequestLookupError(f"Series {message.series_id} has no monitored seasons")

        decision = decide_series(request, message.season_numbers, monitored)
        self._apply(decision)

    def handle_movie_download(self, message: MovieDownload) -> None:
        if not message.is_first_acquisition:
            logger.debug("Download is an upgrade, skipping")
            return

        request = self.store.find_movie(message.ids.primary_id)

        if request is None:
            logger.debug(f"No pending request for movie {message.ids}")
            return

        self._apply(decide_movie(request))

    def rebuild(self) -> None:
        """Replace the store with the approved requests still waiting for media."""

        requests = self.seerr.fetch_approved()
        self.store.replace(requests)
        logger.log("REQUEST", f"Tracking {len(self.store)} pending requests")

    def _get_series(self, series_id: int) -> SonarrSeries:
        for api in self.sonarr_apis:
            try:
                return api.get_series(series_id)
            except SonarrAPIError as e:
                logger.debug(f"Sonarr at {api.base_url} has no series {series_id}: {e}")

        raise RequestLookupError(f"Could not find Sonarr series with id {series_id}")

    def _apply(self, decision: Decision) -> None:
        notification = decision.notification

        if notification is None:
            return

        if decision.remove:
            self.store.remove(notification.request)

        self.notifier.send(notification)
