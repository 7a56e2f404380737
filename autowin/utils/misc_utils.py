# autowin/utils/misc_utils.py
import re

_TEAM_KEY_RE = re.compile(r"^frc(\d+)$")


def team_key(team: int) -> str:
    """TBA key for a team number, e.g. 254 -> 'frc254'."""
    return f"frc{team}"


def parse_team(value: object) -> int:
    """Team number from an int, a digit string, or a TBA key."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid team number: {value!r}")
    if isinstance(value, int):
        team = value
    else:
        text = str(value).strip().lower()
        match = _TEAM_KEY_RE.match(text)
        if match:
            text = match.group(1)
        if not text.isdigit():
            raise ValueError(f"Invalid team number: {value!r}")
        team = int(text)
    if team <= 0:
        raise ValueError(f"Team number must be positive: {value!r}")
    return team
