from typing import Any, List, Optional

from informarr.apis.models import ApiModel


class Series(ApiModel):
    id: int
    title: str | None = None
    tmdb_id: int | None = None
    tvdb_id: int | None = None


class Episode(ApiModel):
    season_number: int
    episode_number: int
    title: str | None = None


class SonarrWebhook(ApiModel):
    event_type: str
    instance_name: str | None = None
    series: Optional[Series] = None
    episodes: List[Episode] = []
    is_upgrade: bool = False
    episode_files: Optional[List[dict[str, Any]]] = None

    @property
    def is_test(self) -> bool:
        return self.event_type == "Test"

    @property
    def is_download(self) -> bool:
        return self.event_type == "Download"
