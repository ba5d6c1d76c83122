"""Notification service for Informarr"""

from dataclasses import dataclass

from apprise import Apprise
from loguru import logger

from informarr.services.decisions import (
    MediaAvailable,
    Notification,
    OngoingEpisodeAvailable,
    OngoingSeasonAvailable,
)
from informarr.settings.manager import settings_manager


@dataclass(frozen=True)
class Message:
    title: str
    body: str
    attach: str | None = None


def format_notification(notification: Notification) -> Message:
    """
    Render a notification as a chat message.

    The heading names the kind of news, the first body line names the media
    (with seasons or episodes for shows), followed by the overview. The
    requester is mentioned on Discord when their id is known.
    """

    request = notification.request
    overview = request.overview
    attach = None

    match notification:
        case MediaAvailable(seasons=seasons):
            heading = "New Content Available"
            name = request.title
            if seasons:
                name = f"{name} - Season {', '.join(str(s) for s in seasons)}"
            attach = request.image_url
        case OngoingSeasonAvailable(season_number=season, episode_number=episode):
            heading = "New Content Available"
            name = f"{request.title} - Season {season} Episode 1 to {episode}"
        case OngoingEpisodeAvailable(season_number=season, episode_number=episode):
            heading = "New Episode Available"
            name = f"{request.title} - Season {season} Episode {episode}"
            overview = ""
        case _:
            raise TypeError(f"Unknown notification {notification!r}")

    body = f"**{name}**\n\n{overview}".strip()

    if request.requested_by.discord_id:
        body = f"<@{request.requested_by.discord_id}>\n{body}"

    return Message(title=heading, body=body, attach=attach)


class NotificationService:
    """Sends notifications to every configured Apprise service"""

    def __init__(self):
        self.key = "notifications"
        self.settings = settings_manager.settings.notifications
        self.apprise = Apprise()
        self._initialize_apprise()

    def _initialize_apprise(self):
        if not self.settings.enabled:
            logger.debug("Notifications are disabled in settings")
            return

        for service_url in self.settings.service_urls:
            # Discord renders markdown only when asked to
            if "discord" in service_url and "format=" not in service_url:
                separator = "&" if "?" in service_url else "?"
                service_url = f"{service_url}{separator}format=markdown"

            if not self.apprise.add(service_url):
                logger.warning(f"Invalid notification service URL: {service_url[:50]}...")
                continue

            logger.debug(f"Added notification service: {service_url[:50]}...")

        if len(self.apprise) > 0:
            logger.success(
                f"NotificationService initialized with {len(self.apprise)} service(s)"
            )

    def send(self, notification: Notification) -> None:
        """Send a notification. Delivery failures are logged and never raised."""

        message = format_notification(notification)
        logger.log("NOTIFY", f"{message.title}: {notification.request.log_string}")

        if not self.settings.enabled or len(self.apprise) == 0:
            logger.debug("No notification services configured")
            return

        try:
            sent = self.apprise.notify(
                title=message.title, body=message.body, attach=message.attach
            )
        except Exception as e:
            logger.warning(f"Failed to send notification: {e}")
            return

        if not sent:
            logger.warning(
                f"Failed to send notification for {notification.request.log_string}"
            )
