from dataclasses import dataclass, field
from datetime import datetime

from informarr.media.request import MediaIdentifiers


@dataclass(frozen=True)
class SeerrApproval:
    """A request was approved in the request portal."""

    request_id: int
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def log_message(self) -> str:
        return f"approval of request {self.request_id}"


@dataclass(frozen=True)
class SeriesDownload:
    """Sonarr grabbed or imported episodes of a series."""

    ids: MediaIdentifiers
    series_id: int
    season_numbers: tuple[int, ...] = ()
    is_upgrade: bool = False
    has_episode_files: bool = False
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def is_first_acquisition(self) -> bool:
        """Neither an upgrade of existing files nor the import-complete follow-up."""
        return not (self.is_upgrade or self.has_episode_files)

    @property
    def log_message(self) -> str:
        seasons = ", ".join(str(s) for s in sorted(set(self.season_numbers)))
        return f"download of series {self.series_id} ({self.ids}) seasons [{seasons}]"


@dataclass(frozen=True)
class MovieDownload:
    """Radarr downloaded a movie."""

    ids: MediaIdentifiers
    is_upgrade: bool = False
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def is_first_acquisition(self) -> bool:
        return not self.is_upgrade

    @property
    def log_message(self) -> str:
        return f"download of movie ({self.ids})"


@dataclass(frozen=True)
class Resync:
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def log_message(self) -> str:
        return "scheduled resync"


@dataclass(frozen=True)
class Shutdown:
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def log_message(self) -> str:
        return "shutdown"


Message = SeerrApproval | SeriesDownload | MovieDownload | Resync | Shutdown
