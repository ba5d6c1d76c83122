from typing import Optional

from informarr.apis.models import ApiModel


class Movie(ApiModel):
    id: int | None = None
    title: str | None = None
    tmdb_id: int | None = None
    imdb_id: str | None = None


class RadarrWebhook(ApiModel):
    event_type: str
    instance_name: str | None = None
    movie: Optional[Movie] = None
    is_upgrade: bool = False

    @property
    def is_test(self) -> bool:
        return self.event_type == "Test"

    @property
    def is_download(self) -> bool:
        return self.event_type == "Download"
