from .identity import matches
from .request import MediaIdentifiers, MediaType, PendingRequest, RequestedBy
from .store import PendingRequestStore

__all__ = [
    "matches",
    "MediaIdentifiers",
    "MediaType",
    "PendingRequest",
    "PendingRequestStore",
    "RequestedBy",
]
