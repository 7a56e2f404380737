from typing import Any, Iterable, List, Mapping, Optional, Sequence

from autowin.models.enums import AllianceColor
from autowin.utils.misc_utils import team_key

# TBA has renamed the alliance auto total across game years; tried in order.
AUTO_POINTS_FIELDS = ("autoPoints", "totalAutoPoints", "auto_points")


def _alliance_auto_points(
    breakdown: Any, color: str, fields: Sequence[str]
) -> Optional[float]:
    color_breakdown = breakdown.get(color) if isinstance(breakdown, Mapping) else None
    if not isinstance(color_breakdown, Mapping):
        return None
    for field in fields:
        value = color_breakdown.get(field)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def extract_auto_scores(
    matches: Iterable[Any],
    team: int,
    fields: Sequence[str] = AUTO_POINTS_FIELDS,
) -> List[float]:
    """Per-robot auto scores for ``team``, one per match it played.

    Each value is the team's alliance auto total divided by three. Matches
    without a score breakdown, or without a recognised auto field, are
    skipped. Order follows ``matches``.
    """
    key = team_key(team)
    scores: List[float] = []
    for match in matches:
        if not isinstance(match, Mapping):
            continue
        breakdown = match.get("score_breakdown")
        if not breakdown:
            continue
        alliances = match.get("alliances")
        if not isinstance(alliances, Mapping):
            continue
        for color in AllianceColor:
            alliance = alliances.get(color.value)
            roster = alliance.get("team_keys") if isinstance(alliance, Mapping) else None
            if roster and key in roster:
                auto = _alliance_auto_points(breakdown, color.value, fields)
                if auto is not None:
                    scores.append(auto / 3)
                break
    return scores
