from dataclasses import dataclass, field
from typing import Dict, List, Optional

import scorebook.util as util
from scorebook.definitions.delivery import BALLS_PER_OVER, MAX_WICKETS
from scorebook.definitions.match import (
    DEFAULT_TOTAL_OVERS,
    TEAM_A,
    TEAM_B,
    TEAM_KEYS,
    TossChoice,
    other_team,
)
from scorebook.error import EngineError, RejectReason
from scorebook.innings import InningsSnapshot, create_innings
from scorebook.util import LOGGER
from scorebook.validators import validate_bowler, validate_innings_start


@dataclass
class Team:
    name: str
    players: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "players": list(self.players)}

    @classmethod
    def from_dict(cls, payload: dict) -> "Team":
        return cls(payload["name"], list(payload.get("players", [])))


@dataclass
class Toss:
    winner: Optional[str] = None
    choice: Optional[TossChoice] = None

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "choice": self.choice.value if self.choice else None,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Toss":
        choice = payload.get("choice")
        return cls(payload.get("winner"), TossChoice(choice) if choice else None)


@dataclass
class MatchConfig:
    match_id: str
    teams: Dict[str, Team]
    toss: Toss = field(default_factory=Toss)
    total_overs: int = DEFAULT_TOTAL_OVERS
    balls_per_over: int = BALLS_PER_OVER

    def team_name(self, team_key: str) -> str:
        return self.teams[team_key].name

    def to_dict(self) -> dict:
        return {
            "matchId": self.match_id,
            "config": {
                "totalOvers": self.total_overs,
                "ballsPerOver": self.balls_per_over,
            },
            "teams": {key: team.to_dict() for key, team in self.teams.items()},
            "toss": self.toss.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "MatchConfig":
        try:
            settings = payload.get("config", {})
            teams = {key: Team.from_dict(payload["teams"][key]) for key in TEAM_KEYS}
            return cls(
                match_id=payload.get("matchId") or new_match_id(),
                teams=teams,
                toss=Toss.from_dict(payload.get("toss") or {}),
                total_overs=settings.get("totalOvers", DEFAULT_TOTAL_OVERS),
                balls_per_over=settings.get("ballsPerOver", BALLS_PER_OVER),
            )
        except (KeyError, TypeError, ValueError) as e:
            msg = f"malformed match config: {e}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)


def new_match_id() -> str:
    return f"match_{int(util.get_current_time() * 1000)}"


def create_match_config(
    team_a: str = "Red Storm",
    team_a_players: Optional[List[str]] = None,
    team_b: str = "Blue Thunder",
    team_b_players: Optional[List[str]] = None,
    total_overs: int = DEFAULT_TOTAL_OVERS,
    toss_winner: Optional[str] = None,
    toss_choice: Optional[TossChoice] = None,
) -> MatchConfig:
    return MatchConfig(
        match_id=new_match_id(),
        teams={
            TEAM_A: Team(team_a, list(team_a_players or [])),
            TEAM_B: Team(team_b, list(team_b_players or [])),
        },
        toss=Toss(toss_winner, toss_choice),
        total_overs=total_overs,
    )


def first_batting_team(config: MatchConfig) -> str:
    if config.toss.choice == TossChoice.BAT:
        return config.toss.winner
    return other_team(config.toss.winner)


class MatchInnings:
    """Ordered innings of a match plus the index of the one being scored."""

    def __init__(
        self, innings: Optional[List[InningsSnapshot]] = None, current_index: int = -1
    ):
        self.innings = list(innings or [])
        self.current_index = current_index

    def __len__(self) -> int:
        return len(self.innings)

    def __getitem__(self, index: int) -> InningsSnapshot:
        return self.innings[index]

    @property
    def current(self) -> Optional[InningsSnapshot]:
        if self.current_index < 0:
            return None
        return self.innings[self.current_index]

    def add(self, snapshot: InningsSnapshot) -> int:
        self.innings.append(snapshot)
        self.current_index = len(self.innings) - 1
        return self.current_index

    def delete(self, index: int):
        self._check_index(index)
        del self.innings[index]
        if index == self.current_index:
            if self.innings:
                self.current_index = min(index, len(self.innings) - 1)
            else:
                self.current_index = -1
        elif index < self.current_index:
            self.current_index -= 1

    def select(self, index: int):
        self._check_index(index)
        self.current_index = index

    def update(self, index: int, snapshot: InningsSnapshot):
        self._check_index(index)
        self.innings[index] = snapshot

    def _check_index(self, index: int):
        if not 0 <= index < len(self.innings):
            msg = f"no innings at index {index}, match has {len(self.innings)}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)

    def to_dict(self) -> dict:
        return {
            "innings": [snapshot.to_dict() for snapshot in self.innings],
            "currentInningsIndex": self.current_index,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "MatchInnings":
        return cls(
            [InningsSnapshot.from_dict(i) for i in payload.get("innings", [])],
            payload.get("currentInningsIndex", -1),
        )


def start_innings(
    config: MatchConfig,
    batting_team: str,
    on_strike: str,
    off_strike: str,
    bowler: str,
) -> InningsSnapshot:
    validation = validate_innings_start(config)
    if not validation:
        LOGGER.warning(validation.error)
        raise EngineError(validation.error, RejectReason.ILLEGAL_OPERATION)
    if batting_team not in TEAM_KEYS:
        msg = f"invalid batting team {batting_team}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    bowling_team = other_team(batting_team)
    batters = config.teams[batting_team].players
    for opener in (on_strike, off_strike):
        if opener not in batters:
            msg = f"{opener} is not in the {config.team_name(batting_team)} lineup"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
    validation = validate_bowler(bowler, config.teams[bowling_team].players)
    if not validation:
        LOGGER.warning(validation.error)
        raise EngineError(validation.error, RejectReason.BAD_COMMAND)
    return create_innings(
        batting_team,
        bowling_team,
        batters,
        config.teams[bowling_team].players,
        on_strike,
        off_strike,
        bowler,
    )


def target(first_innings: InningsSnapshot) -> int:
    return first_innings.total_runs + 1


def runs_to_win(innings: InningsSnapshot, runs_target: int) -> int:
    return max(0, runs_target - innings.total_runs)


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def match_result(config: MatchConfig, match_innings: MatchInnings) -> Optional[str]:
    if len(match_innings) < 2:
        return None
    first, second = match_innings[0], match_innings[1]
    if second.total_runs > first.total_runs:
        margin = plural(MAX_WICKETS - second.wickets, "wicket")
        return f"{config.team_name(second.batting_team)} won by {margin}"
    if first.total_runs > second.total_runs:
        margin = plural(first.total_runs - second.total_runs, "run")
        return f"{config.team_name(first.batting_team)} won by {margin}"
    return "Match Tied"
