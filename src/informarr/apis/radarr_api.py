"""Radarr API client"""

from loguru import logger
from requests.exceptions import RequestException

from informarr.utils.request import SmartSession


class RadarrAPI:
    """Handles Radarr API communication"""

    def __init__(self, api_key: str, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.session = SmartSession(base_url=self.base_url, retries=2)
        self.session.headers.update({"X-Api-Key": api_key})

    def validate(self) -> bool:
        """Validate API connection"""

        try:
            return self.session.get("api", timeout=15).ok
        except RequestException as e:
            logger.error(f"Radarr at {self.base_url} is not reachable: {e}")

        return False
