"""In-memory store of outstanding requests"""

from collections.abc import Iterable, Iterator

from loguru import logger

from informarr.media.identity import matches
from informarr.media.request import MediaIdentifiers, MediaType, PendingRequest


class PendingRequestStore:
    """
    The set of requests still waiting for their media to become available.

    Holds at most one request per media item. Two requests are the same item
    when their media types agree and their identifiers match; TMDB ids are not
    unique across movies and shows. Not thread-safe: only the reconciliation
    loop may touch it.
    """

    def __init__(self):
        self._requests: list[PendingRequest] = []

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[PendingRequest]:
        return iter(list(self._requests))

    def __contains__(self, request: PendingRequest) -> bool:
        return self._find(request.media_type, request.ids) is not None

    def _find(
        self, media_type: MediaType, ids: MediaIdentifiers
    ) -> PendingRequest | None:
        if ids.is_empty:
            return None

        return next(
            (
                request
                for request in self._requests
                if request.media_type == media_type and matches(request.ids, ids)
            ),
            None,
        )

    def upsert(self, request: PendingRequest) -> bool:
        """Add a request unless the same media item is already pending. Returns whether it was added."""

        if request in self:
            logger.debug(f"{request.log_string} is already pending, skipping")
            return False

        self._requests.append(request)
        logger.log("REQUEST", f"Tracking {request.log_string} ({request.ids})")
        return True

    def find_tv(
        self, primary_id: int | None, secondary_id: int | None = None
    ) -> PendingRequest | None:
        return self._find(MediaType.TV, MediaIdentifiers(primary_id, secondary_id))

    def find_movie(self, primary_id: int | None) -> PendingRequest | None:
        return self._find(MediaType.Movie, MediaIdentifiers(primary_id))

    def remove(self, request: PendingRequest) -> bool:
        """Remove the pending request for the same media item. Returns whether one was removed."""

        stored = self._find(request.media_type, request.ids)

        if stored is None:
            return False

        self._requests.remove(stored)
        logger.debug(f"Stopped tracking {stored.log_string}")
        return True

    def clear(self) -> None:
        self._requests.clear()

    def replace(self, requests: Iterable[PendingRequest]) -> None:
        """Swap the whole content for `requests`, keeping one request per media item."""

        self.clear()

        for request in requests:
            self.upsert(request)

    def snapshot(self) -> list[PendingRequest]:
        """A copy of the pending requests, safe to hand to other threads."""

        return list(self._requests)
