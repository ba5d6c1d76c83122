from kink import di
from loguru import logger

from informarr.settings.manager import settings_manager
from informarr.settings.models import ArrInstanceModel

from .radarr_api import RadarrAPI
from .seerr_api import SeerrAPI, SeerrAPIError
from .sonarr_api import SonarrAPI, SonarrAPIError


def bootstrap_apis():
    """
    Register the upstream clients in the container.

    Sonarr and Radarr instances come from the settings, or from the request
    portal's own settings when none are configured.

    Raises:
        SeerrAPIError: If the instances had to be discovered and the portal could not be queried.
    """

    __setup_seerr()
    __setup_sonarr()
    __setup_radarr()


def __setup_seerr():
    di[SeerrAPI] = SeerrAPI(
        settings_manager.settings.seerr.api_key,
        settings_manager.settings.seerr.url,
    )


def __setup_sonarr():
    instances = settings_manager.settings.sonarr

    if not instances:
        instances = [
            ArrInstanceModel(url=s.url, api_key=s.api_key)
            for s in di[SeerrAPI].get_sonarr_settings()
        ]

    di["sonarr_apis"] = [SonarrAPI(i.api_key, i.url) for i in instances]
    logger.debug(f"Sonarr instances: {len(instances)}")


def __setup_radarr():
    instances = settings_manager.settings.radarr

    if not instances:
        instances = [
            ArrInstanceModel(url=s.url, api_key=s.api_key)
            for s in di[SeerrAPI].get_radarr_settings()
        ]

    di["radarr_apis"] = [RadarrAPI(i.api_key, i.url) for i in instances]
    logger.debug(f"Radarr instances: {len(instances)}")


__all__ = [
    "bootstrap_apis",
    "RadarrAPI",
    "SeerrAPI",
    "SeerrAPIError",
    "SonarrAPI",
    "SonarrAPIError",
]
