"""Informarr settings models"""

from typing import Annotated, Any, List, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from informarr.utils import generate_api_key, get_version


def validate_empty_or_url(v: Any) -> str:
    if isinstance(v, str):
        if v == "":
            return v
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("Must be a valid URL or empty string")
        return v.rstrip("/")
    raise ValueError("Must be a string")


EmptyOrUrl = Annotated[str, BeforeValidator(validate_empty_or_url)]


class SeerrModel(BaseModel):
    url: EmptyOrUrl = Field(
        default="http://localhost:5055", description="Overseerr/Jellyseerr URL"
    )
    api_key: str = Field(default="", description="Overseerr/Jellyseerr API key")


class ArrInstanceModel(BaseModel):
    url: EmptyOrUrl = Field(description="Instance URL, including port")
    api_key: str = Field(description="Instance API key")


class NotificationsModel(BaseModel):
    enabled: bool = Field(default=False, description="Enable notifications")
    service_urls: List[str] = Field(
        default_factory=list,
        description="Apprise notification URLs (e.g., Discord or Telegram)",
    )
    image_base_url: EmptyOrUrl = Field(
        default="https://image.tmdb.org/t/p/w600_and_h900_bestv2",
        description="Base URL prepended to poster paths",
    )


class LoggingModel(BaseModel):
    enabled: bool = Field(default=True, description="Enable file logging")
    clean_interval: int = Field(
        default=60 * 60, description="Log cleanup interval in seconds (1 hour default)"
    )
    retention_hours: int = Field(
        default=24, description="Log retention period in hours"
    )
    rotation_mb: int = Field(default=10, description="Log file rotation size in MB")
    compression: Literal["zip", "gz", "bz2", "xz", "disabled"] = Field(
        default="disabled",
        description="Log compression format (empty for no compression)",
    )

    @field_validator("compression", mode="before")
    def check_compression(cls, v):
        if v == "" or not v:
            return "disabled"
        return v


class AppModel(BaseModel):
    version: str = Field(default_factory=get_version, description="Application version")
    api_key: str = Field(default="", description="API key for the webhook endpoints")
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = (
        Field(default="INFO", description="Logging level")
    )
    resync_interval: int = Field(
        default=60 * 30,
        description="Interval in seconds between full rebuilds of the pending requests (30 minutes default)",
    )
    seerr: SeerrModel = Field(
        default_factory=lambda: SeerrModel(),
        description="Request portal configuration",
    )
    sonarr: List[ArrInstanceModel] = Field(
        default_factory=list,
        description="Sonarr instances (empty to discover them from the request portal)",
    )
    radarr: List[ArrInstanceModel] = Field(
        default_factory=list,
        description="Radarr instances (empty to discover them from the request portal)",
    )
    notifications: NotificationsModel = Field(
        default_factory=lambda: NotificationsModel(),
        description="Notifications configuration",
    )
    logging: LoggingModel = Field(
        default_factory=lambda: LoggingModel(), description="Logging configuration"
    )

    @field_validator("log_level", mode="before")
    def check_debug(cls, v):
        if v == True:
            return "DEBUG"
        elif v == False:
            return "INFO"
        return v.upper()

    @field_validator("resync_interval")
    def check_resync_interval(cls, v):
        if v < (limit := 60):
            raise ValueError(f"resync_interval must be at least {limit} seconds")
        return v

    def __init__(self, **data: Any):
        current_version = get_version()
        existing_version = data.get("version", current_version)
        super().__init__(**data)
        if existing_version < current_version:
            self.version = current_version

        if self.api_key == "":
            self.api_key = generate_api_key()
