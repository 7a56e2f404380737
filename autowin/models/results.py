# autowin/models/results.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .enums import AllianceColor, VarianceSource


class RatingRecord(BaseModel):
    """A team's auto-period EPA and the season it was taken from."""

    model_config = ConfigDict(frozen=True)

    team: int
    season: int  # May be one season earlier than requested
    auto_rating: float


class VarianceEstimate(BaseModel):
    """Per-robot auto score standard deviation with its provenance."""

    model_config = ConfigDict(frozen=True)

    team: int
    std_dev: Optional[float] = None
    source: VarianceSource = VarianceSource.NONE
    matches: int = 0
    season: Optional[int] = None  # Set for season-sourced estimates

    @computed_field  # type: ignore[misc]
    @property
    def label(self) -> str:
        """Human-readable provenance, e.g. 'event (7 matches)'."""
        if self.source is VarianceSource.EVENT:
            return f"event ({self.matches} matches)"
        if self.source is VarianceSource.SEASON:
            return f"{self.season} season ({self.matches} matches)"
        return "no data"


class WinProbabilityResult(BaseModel):
    """Auto-period win probabilities for alliance A versus alliance B."""

    model_config = ConfigDict(frozen=True)

    probability_a: float = Field(..., ge=0, le=1)
    probability_b: float = Field(..., ge=0, le=1)
    total_a: float
    total_b: float

    color_a: AllianceColor = AllianceColor.RED
    color_b: AllianceColor = AllianceColor.BLUE
    season: Optional[int] = None
    match_sd: Optional[float] = None
    z_score: Optional[float] = None
    used_fallback_sd: bool = False

    @model_validator(mode="after")
    def _probabilities_sum_to_one(self) -> "WinProbabilityResult":
        if abs(self.probability_a + self.probability_b - 1.0) > 1e-9:
            raise ValueError("probability_a and probability_b must sum to 1")
        return self

    @computed_field  # type: ignore[misc]
    @property
    def favorite(self) -> Optional[AllianceColor]:
        """Color more likely to win auto, or None for a dead heat."""
        if self.probability_a > self.probability_b:
            return self.color_a
        if self.probability_b > self.probability_a:
            return self.color_b
        return None
