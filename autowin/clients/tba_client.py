# autowin/clients/tba_client.py

from typing import Any, Dict, List, Optional

from loguru import logger

from autowin.config.settings import settings
from autowin.logging.setup import register_secret
from autowin.utils.misc_utils import team_key
from .base_client import BaseClient, ConfigurationError, ResponseFormatError


class TBAClient(BaseClient):
    """Client for The Blue Alliance match records."""

    service: str = "tba"

    def __init__(
        self,
        *args,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        api_key = api_key or settings.tba_auth_key
        if not api_key:
            logger.error("TBA auth key is not set in environment variables.")
            raise ConfigurationError("Missing TBA auth key configuration.")

        register_secret(api_key)
        super().__init__(*args, **kwargs)
        self.base_url = (base_url or settings.tba_url).rstrip("/")
        self._headers = {"X-TBA-Auth-Key": api_key}
        logger.debug("TBAClient initialized with auth key header.")

    async def _fetch_matches(self, url: str) -> List[Dict[str, Any]]:
        data = await self.fetch_json(url, headers=self._headers)
        if not isinstance(data, list):
            raise ResponseFormatError(f"Expected a list of matches from {url}")
        return data

    async def event_matches(self, event_key: str) -> List[Dict[str, Any]]:
        """All match records for an event (e.g. ``2024casj``)."""
        return await self._fetch_matches(f"{self.base_url}/event/{event_key}/matches")

    async def team_matches(self, team: int, season: int) -> List[Dict[str, Any]]:
        """All of a team's match records for one season, across events."""
        return await self._fetch_matches(
            f"{self.base_url}/team/{team_key(team)}/matches/{season}"
        )
