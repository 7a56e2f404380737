from enum import Enum


class AllianceColor(str, Enum):
    RED = "red"
    BLUE = "blue"


class VarianceSource(str, Enum):
    """Which fallback tier produced a variance estimate."""

    EVENT = "event"
    SEASON = "season"
    NONE = "none"
