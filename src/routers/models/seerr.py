from typing import Any, List, Literal, Optional

from pydantic import BaseModel, field_validator

MediaType = Literal["movie", "tv"]

APPROVAL_TYPES = ("MEDIA_APPROVED", "MEDIA_AUTO_APPROVED")


class Media(BaseModel):
    media_type: MediaType
    status: str | None = None
    tmdbId: int | None = None
    tvdbId: int | None = None

    @field_validator("tvdbId", "tmdbId", mode="before")
    @classmethod
    def validate_ids(cls, value: Any):
        if value and isinstance(value, str):
            return int(value)
        return value or None


class RequestInfo(BaseModel):
    request_id: int
    requestedBy_username: str | None = None
    requestedBy_settings_discordId: str | None = None

    @field_validator("request_id", mode="before")
    @classmethod
    def validate_request_id(cls, value: Any):
        if isinstance(value, str):
            return int(value)
        return value


class SeerrWebhook(BaseModel):
    notification_type: str
    event: str | None = None
    subject: str | None = None
    message: Optional[str] = None
    image: Optional[str] = None
    media: Optional[Media] = None
    request: Optional[RequestInfo] = None
    extra: List[dict[str, Any]] = []

    @property
    def is_test(self) -> bool:
        return self.notification_type == "TEST_NOTIFICATION"

    @property
    def is_approval(self) -> bool:
        return self.notification_type in APPROVAL_TYPES
