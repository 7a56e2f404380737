from typing import Callable, List, Optional, Sequence

from loguru import logger

from autowin.clients.base_client import ClientError
from autowin.clients.tba_client import TBAClient
from autowin.config.settings import settings
from autowin.models.enums import VarianceSource
from autowin.models.results import VarianceEstimate

from .match_scores import extract_auto_scores
from .probability import sample_std_dev

ProgressCallback = Callable[[str], None]

MIN_SAMPLE_MATCHES = 3


def _ignore(_: str) -> None:
    pass


class VarianceEstimator:
    """Estimates a team's per-robot auto score spread from TBA match data.

    Tiers, first hit wins: the given event, then the team's own matches in
    the season and the one before it.
    """

    def __init__(
        self,
        tba: TBAClient,
        auto_points_fields: Optional[Sequence[str]] = None,
        two_match_sd_factor: Optional[float] = None,
    ):
        self.tba = tba
        self.auto_points_fields = tuple(
            auto_points_fields or settings.auto_points_fields
        )
        self.two_match_sd_factor = (
            two_match_sd_factor
            if two_match_sd_factor is not None
            else settings.two_match_sd_factor
        )

    async def _event_scores(
        self, team: int, event_key: str, log: ProgressCallback
    ) -> List[float]:
        try:
            matches = await self.tba.event_matches(event_key)
        except ClientError as e:
            logger.warning(f"Event matches for {event_key} unavailable: {e}")
            log(f"Team {team} event fetch error: {e}")
            return []
        scores = extract_auto_scores(matches, team, self.auto_points_fields)
        log(f"Team {team} event matches found: {len(scores)}")
        return scores

    async def _season_scores(self, team: int, season: int) -> List[float]:
        try:
            matches = await self.tba.team_matches(team, season)
        except ClientError as e:
            logger.debug(f"Season {season} matches for team {team} unavailable: {e}")
            return []
        return extract_auto_scores(matches, team, self.auto_points_fields)

    async def auto_std_dev(
        self,
        team: int,
        event_key: Optional[str],
        season: int,
        log: Optional[ProgressCallback] = None,
    ) -> VarianceEstimate:
        log = log or _ignore

        if event_key:
            scores = await self._event_scores(team, event_key, log)
            if len(scores) >= MIN_SAMPLE_MATCHES:
                return VarianceEstimate(
                    team=team,
                    std_dev=sample_std_dev(scores),
                    source=VarianceSource.EVENT,
                    matches=len(scores),
                )
            if len(scores) == 2:
                # Two points cannot support a sample sd; scale the first score
                return VarianceEstimate(
                    team=team,
                    std_dev=scores[0] * self.two_match_sd_factor,
                    source=VarianceSource.EVENT,
                    matches=2,
                )

        for year in (season, season - 1):
            scores = await self._season_scores(team, year)
            if len(scores) >= MIN_SAMPLE_MATCHES:
                return VarianceEstimate(
                    team=team,
                    std_dev=sample_std_dev(scores),
                    source=VarianceSource.SEASON,
                    matches=len(scores),
                    season=year,
                )

        logger.debug(f"No match variance data for team {team}")
        return VarianceEstimate(team=team)
