import os
import threading
from queue import Empty, Queue

from apscheduler.schedulers.background import BackgroundScheduler
from kink import di
from loguru import logger
from requests.exceptions import RequestException

from informarr.apis import (
    RadarrAPI,
    SeerrAPIError,
    SonarrAPI,
    SonarrAPIError,
    bootstrap_apis,
)
from informarr.managers.request_manager import RequestManager
from informarr.services.content.seerr import Seerr
from informarr.services.decisions import RequestLookupError
from informarr.services.notifications import NotificationService
from informarr.settings.manager import settings_manager
from informarr.types import (
    Message,
    MovieDownload,
    Resync,
    SeerrApproval,
    SeriesDownload,
    Shutdown,
)
from informarr.utils import data_dir_path, get_version
from informarr.utils.logging import log_cleaner


class StartupError(Exception):
    """Informarr could not reach its upstreams or build its initial state"""


class Program(threading.Thread):
    """
    The reconciliation loop.

    Webhooks and the scheduler only enqueue messages; this thread handles them
    one at a time in arrival order and is the only writer of the pending
    request store.
    """

    def __init__(self):
        super().__init__(name="Informarr", daemon=True)

        self.initialized = False
        self.running = False
        self.event_queue: Queue[Message] = Queue()
        self.manager: RequestManager | None = None
        self.scheduler: BackgroundScheduler | None = None

    def initialize_apis(self):
        bootstrap_apis()

    def initialize_services(self):
        self.manager = RequestManager(
            seerr=Seerr(),
            sonarr_apis=di["sonarr_apis"],
            notifier=NotificationService(),
        )

    def validate(self) -> bool:
        """Check that every upstream answers."""

        if not self.manager.seerr.validate():
            return False

        sonarr_apis: list[SonarrAPI] = di["sonarr_apis"]
        radarr_apis: list[RadarrAPI] = di["radarr_apis"]

        if not sonarr_apis and not radarr_apis:
            logger.error("No Sonarr or Radarr instance configured or discovered")
            return False

        return all(api.validate() for api in [*sonarr_apis, *radarr_apis])

    @property
    def pending_count(self) -> int:
        return len(self.manager.store) if self.manager else 0

    def start(self):
        """
        Validate the upstreams, build the initial pending requests and start the loop.

        Raises:
            StartupError: If an upstream is unreachable or the initial rebuild fails.
        """

        logger.log("PROGRAM", f"Informarr v{get_version()} starting!")

        os.makedirs(data_dir_path, exist_ok=True)

        if not settings_manager.settings_file.exists():
            logger.log("PROGRAM", "Settings file not found, creating default settings")
            settings_manager.save()

        try:
            self.initialize_apis()
        except (SeerrAPIError, RequestException) as e:
            raise StartupError(f"Could not discover download managers: {e}") from e

        self.initialize_services()

        if not self.validate():
            raise StartupError("Not every upstream is reachable")

        try:
            self.manager.rebuild()
        except (SeerrAPIError, RequestException) as e:
            raise StartupError(f"Initial rebuild failed: {e}") from e

        self.scheduler = BackgroundScheduler()
        self._schedule_functions()

        self.running = True
        super().start()
        self.scheduler.start()
        self.initialized = True

        logger.success("Informarr is running!")

    def _schedule_functions(self) -> None:
        scheduled_functions = {
            self._enqueue_resync: {"interval": settings_manager.settings.resync_interval},
            log_cleaner: {"interval": settings_manager.settings.logging.clean_interval},
        }

        for func, config in scheduled_functions.items():
            self.scheduler.add_job(
                func,
                "interval",
                seconds=config["interval"],
                id=f"{func.__name__}",
                max_instances=1,
                replace_existing=True,
                misfire_grace_time=30,
            )
            logger.log(
                "PROGRAM",
                f"Scheduled {func.__name__} to run every {config['interval']} seconds.",
            )

    def _enqueue_resync(self) -> None:
        self.add_event(Resync())

    def add_event(self, message: Message) -> bool:
        """Queue a message for the loop. Safe to call from any thread."""

        self.event_queue.put(message)
        logger.trace(f"Queued {message.log_message}")
        return True

    def run(self):
        while self.running:
            try:
                message = self.event_queue.get(timeout=1)
            except Empty:
                continue

            try:
                if isinstance(message, Shutdown):
                    break

                self.handle(message)
            finally:
                self.event_queue.task_done()

        logger.log("PROGRAM", "Reconciliation loop stopped")

    def handle(self, message: Message) -> None:
        """Handle a single message. Errors are logged and never leave this method."""

        logger.debug(f"Handling {message.log_message}")

        try:
            match message:
                case SeerrApproval():
                    self.manager.handle_approval(message)
                case SeriesDownload():
                    self.manager.handle_series_download(message)
                case MovieDownload():
                    self.manager.handle_movie_download(message)
                case Resync():
                    self.manager.rebuild()
                case _:
                    logger.warning(f"Unknown message {message!r}")
        except (RequestLookupError, SeerrAPIError, SonarrAPIError, RequestException) as e:
            logger.error(f"Failed to handle {message.log_message}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error handling {message.log_message}: {e}")

    def stop(self):
        if not self.running:
            return

        self.running = False
        self.add_event(Shutdown())

        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        logger.log("PROGRAM", "Informarr has been stopped.")

