import enum

DEFAULT_TOTAL_OVERS = 12
TEAM_A = "teamA"
TEAM_B = "teamB"
TEAM_KEYS = (TEAM_A, TEAM_B)
MAX_INNINGS = 2


class TossChoice(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


def other_team(team_key: str) -> str:
    if team_key not in TEAM_KEYS:
        raise ValueError(f"invalid team {team_key}")
    return TEAM_B if team_key == TEAM_A else TEAM_A
