import asyncio
from typing import Callable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from autowin.clients.statbotics_client import StatboticsClient
from autowin.clients.tba_client import TBAClient
from autowin.config.settings import settings
from autowin.models.alliance import Alliance
from autowin.models.enums import AllianceColor
from autowin.models.results import RatingRecord, VarianceEstimate, WinProbabilityResult

from .probability import alliance_total, pooled_match_sd, win_probability
from .variance import VarianceEstimator

ProgressCallback = Callable[[str], None]
AllianceInput = Union[Alliance, Sequence[int]]


def _as_alliance(value: AllianceInput, color: AllianceColor) -> Alliance:
    if isinstance(value, Alliance):
        return value
    return Alliance(color=color, teams=tuple(value))


class AutoWinCalculator:
    """Turns two alliance rosters into auto-period win probabilities.

    Ratings come from Statbotics, score spread from TBA match records. Per
    team lookups run concurrently; progress lines are emitted in roster
    order once each batch has been gathered.
    """

    def __init__(
        self,
        statbotics: StatboticsClient,
        tba: TBAClient,
        fallback_match_sd: Optional[float] = None,
        min_pooled_estimates: Optional[int] = None,
        variance_estimator: Optional[VarianceEstimator] = None,
    ):
        self.statbotics = statbotics
        self.tba = tba
        self.variance = variance_estimator or VarianceEstimator(tba)
        self.fallback_match_sd = (
            fallback_match_sd
            if fallback_match_sd is not None
            else settings.fallback_match_sd
        )
        self.min_pooled_estimates = (
            min_pooled_estimates
            if min_pooled_estimates is not None
            else settings.min_pooled_estimates
        )

    async def _ratings(
        self, teams: Sequence[int], season: int
    ) -> List[Optional[RatingRecord]]:
        return list(
            await asyncio.gather(
                *(self.statbotics.auto_rating(team, season) for team in teams)
            )
        )

    async def _variances(
        self, teams: Sequence[int], event_key: Optional[str], season: int
    ) -> List[Tuple[VarianceEstimate, List[str]]]:
        async def estimate(team: int) -> Tuple[VarianceEstimate, List[str]]:
            lines: List[str] = []
            result = await self.variance.auto_std_dev(
                team, event_key, season, log=lines.append
            )
            return result, lines

        return list(await asyncio.gather(*(estimate(team) for team in teams)))

    async def compute_win_probability(
        self,
        alliance_a: AllianceInput,
        alliance_b: AllianceInput,
        event_key: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        current_year: Optional[int] = None,
    ) -> Optional[WinProbabilityResult]:
        """Probability that ``alliance_a`` outscores ``alliance_b`` in auto.

        Returns None when either alliance has no team with an auto rating.
        """
        a = _as_alliance(alliance_a, AllianceColor.RED)
        b = _as_alliance(alliance_b, AllianceColor.BLUE)
        event_key = (event_key or "").strip() or None

        def emit(line: str) -> None:
            logger.info(line)
            if on_progress is not None:
                on_progress(line)

        season = await self.statbotics.best_season(current_year)
        emit(f"Using {season} EPA data")

        teams = list(a.teams) + list(b.teams)
        records = await self._ratings(teams, season)
        for team, record in zip(teams, records):
            if record is None:
                emit(f"Team {team}: no EPA found")
                continue
            note = f" (from {record.season})" if record.season != season else ""
            emit(f"Team {team} auto EPA: {record.auto_rating:.2f}{note}")

        records_a, records_b = records[: len(a.teams)], records[len(a.teams) :]
        if all(r is None for r in records_a) or all(r is None for r in records_b):
            emit("Insufficient data: an alliance has no auto EPA")
            return None

        total_a = alliance_total(records_a)
        total_b = alliance_total(records_b)
        emit(f"{a.label} alliance auto EPA: {total_a:.2f}")
        emit(f"{b.label} alliance auto EPA: {total_b:.2f}")

        std_devs: List[Optional[float]] = []
        for estimate, lines in await self._variances(teams, event_key, season):
            for line in lines:
                emit(line)
            if estimate.std_dev is None:
                emit(f"Team {estimate.team}: no match variance data")
            else:
                emit(
                    f"Team {estimate.team} auto sd: {estimate.std_dev:.2f} [{estimate.label}]"
                )
            std_devs.append(estimate.std_dev)

        match_sd, used_fallback = pooled_match_sd(
            std_devs, self.min_pooled_estimates, self.fallback_match_sd
        )
        if used_fallback:
            emit(f"Using fallback sd = {match_sd:g}")
        else:
            emit(f"Match auto diff sd: {match_sd:.2f}")

        z, p_a, p_b = win_probability(total_a, total_b, match_sd)
        logger.debug(f"z = {z:.4f}, p({a.color.value}) = {p_a:.4f}")

        return WinProbabilityResult(
            probability_a=p_a,
            probability_b=p_b,
            total_a=total_a,
            total_b=total_b,
            color_a=a.color,
            color_b=b.color,
            season=season,
            match_sd=match_sd,
            z_score=z,
            used_fallback_sd=used_fallback,
        )


async def compute_win_probability(
    alliance_a: AllianceInput,
    alliance_b: AllianceInput,
    event_key: Optional[str] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Optional[WinProbabilityResult]:
    """One-shot calculation with clients built from settings."""
    async with StatboticsClient() as statbotics, TBAClient() as tba:
        calculator = AutoWinCalculator(statbotics, tba)
        return await calculator.compute_win_probability(
            alliance_a, alliance_b, event_key, on_progress
        )
