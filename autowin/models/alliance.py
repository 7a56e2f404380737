# autowin/models/alliance.py
from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from autowin.utils.misc_utils import parse_team

from .enums import AllianceColor

ALLIANCE_SIZE = 3


class Alliance(BaseModel):
    """Three teams playing together under one color."""

    model_config = ConfigDict(frozen=True)

    color: AllianceColor
    teams: Tuple[int, int, int]

    @field_validator("teams", mode="before")
    @classmethod
    def _parse_teams(cls, value: Any) -> List[int]:
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Alliance teams must be a sequence, got {value!r}")
        teams = [parse_team(team) for team in value]
        if len(teams) != ALLIANCE_SIZE:
            raise ValueError(
                f"An alliance has exactly {ALLIANCE_SIZE} teams, got {len(teams)}"
            )
        if len(set(teams)) != len(teams):
            raise ValueError(f"Duplicate team in alliance: {teams}")
        return teams

    @property
    def label(self) -> str:
        return self.color.value.capitalize()
