# autowin/clients/statbotics_client.py

from datetime import date
from typing import Any, Dict, Optional

from loguru import logger

from autowin.config.settings import settings
from autowin.models.results import RatingRecord
from .base_client import BaseClient, ClientError, ResponseFormatError


def _auto_points(payload: Any) -> Optional[float]:
    """Pull ``epa.breakdown.auto_points`` out of a team_year payload."""
    node = payload
    for key in ("epa", "breakdown", "auto_points"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if isinstance(node, bool) or not isinstance(node, (int, float)):
        return None
    return float(node)


class StatboticsClient(BaseClient):
    """Client for Statbotics team-season EPA ratings."""

    service: str = "statbotics"

    def __init__(
        self,
        *args,
        base_url: Optional[str] = None,
        canary_team: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.base_url = (base_url or settings.statbotics_url).rstrip("/")
        self.canary_team = canary_team or settings.canary_team

    async def team_year(self, team: int, season: int) -> Dict[str, Any]:
        """Raw team_year payload for one team and season."""
        data = await self.fetch_json(f"{self.base_url}/team_year/{team}/{season}")
        if not isinstance(data, dict):
            raise ResponseFormatError(
                f"Expected an object for team {team} season {season}"
            )
        return data

    async def best_season(self, current_year: Optional[int] = None) -> int:
        """Current year if the canary team already has an auto EPA, else last year.

        Ratings for a new season are only published once they settle, so an
        empty canary means the current season is too young to use.
        """
        year = current_year or date.today().year
        try:
            data = await self.team_year(self.canary_team, year)
        except ClientError as e:
            logger.warning(
                f"Canary lookup for team {self.canary_team} in {year} failed: {e}"
            )
            return year - 1

        if _auto_points(data) is None:
            logger.info(f"No {year} auto EPA published yet, using {year - 1}")
            return year - 1
        return year

    async def auto_rating(self, team: int, season: int) -> Optional[RatingRecord]:
        """Auto EPA for ``team`` in ``season``, falling back one season."""
        for year in (season, season - 1):
            try:
                data = await self.team_year(team, year)
            except ClientError as e:
                logger.debug(f"No team_year for {team} in {year}: {e}")
                continue
            rating = _auto_points(data)
            if rating is not None:
                return RatingRecord(team=team, season=year, auto_rating=rating)
            logger.debug(f"team_year for {team} in {year} has no auto EPA")

        logger.info(f"No auto EPA for team {team} in {season} or {season - 1}")
        return None
