"""Pending request data model"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MediaType(str, Enum):
    Movie = "movie"
    TV = "tv"


def _normalize_id(value: int | None) -> int | None:
    # Upstream payloads use 0 for "unknown"
    return value or None


@dataclass(frozen=True)
class MediaIdentifiers:
    """The pair of external catalog ids (TMDB, TVDB) of a media item."""

    primary_id: int | None = None
    secondary_id: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "primary_id", _normalize_id(self.primary_id))
        object.__setattr__(self, "secondary_id", _normalize_id(self.secondary_id))

    @property
    def is_empty(self) -> bool:
        return self.primary_id is None and self.secondary_id is None

    def __str__(self) -> str:
        return f"tmdb:{self.primary_id} tvdb:{self.secondary_id}"


@dataclass(frozen=True)
class RequestedBy:
    display_name: str
    discord_id: str | None = None


@dataclass(frozen=True)
class PendingRequest:
    """A single outstanding request for one media item."""

    media_type: MediaType
    ids: MediaIdentifiers
    title: str
    overview: str
    created_at: datetime
    requested_by: RequestedBy
    image_url: str | None = None
    requested_seasons: tuple[int, ...] | None = field(default=None)

    def __post_init__(self):
        if self.requested_seasons is not None:
            object.__setattr__(
                self, "requested_seasons", tuple(sorted(set(self.requested_seasons)))
            )

    @property
    def log_string(self) -> str:
        if self.media_type == MediaType.TV and self.requested_seasons:
            seasons = ", ".join(str(s) for s in self.requested_seasons)
            return f"{self.title} (seasons {seasons})"
        return self.title
