from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from scorebook.ball import Ball
from scorebook.definitions.delivery import MAX_WICKETS
from scorebook.definitions.innings import InningsState
from scorebook.error import EngineError, RejectReason
from scorebook.util import LOGGER

SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class InningsSnapshot:
    """
    Authoritative state of one innings. Every transition returns a new instance,
    and the aggregate counters can always be rebuilt from ``balls``.
    """

    batting_team: str
    bowling_team: str
    batting_players: Tuple[str, ...]
    bowling_players: Tuple[str, ...]
    on_strike: str
    off_strike: str
    current_bowler: str = ""
    balls: Tuple[Ball, ...] = field(default_factory=tuple)
    current_over: int = 1
    current_ball: int = 1
    total_runs: int = 0
    wickets: int = 0
    overs_completed: int = 0
    balls_in_current_over: int = 0
    is_free_hit_pending: bool = False
    version: int = SNAPSHOT_VERSION

    @property
    def at_crease(self) -> Tuple[str, str]:
        return self.on_strike, self.off_strike

    @property
    def dismissed_batsmen(self) -> List[str]:
        return [ball.wicket.batsman for ball in self.balls if ball.wicket]

    @property
    def previous_ball(self) -> Optional[Ball]:
        if not self.balls:
            return None
        return self.balls[-1]

    @property
    def over_closed(self) -> bool:
        # the innings may open at any over number, so look at the log
        if self.balls_in_current_over:
            return False
        return any(
            ball.legal_ball and ball.over == self.current_over for ball in self.balls
        )

    @property
    def needs_bowler(self) -> bool:
        return not self.current_bowler

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "battingTeam": self.batting_team,
            "bowlingTeam": self.bowling_team,
            "battingTeamPlayers": list(self.batting_players),
            "bowlingTeamPlayers": list(self.bowling_players),
            "balls": [ball.to_dict() for ball in self.balls],
            "currentOver": self.current_over,
            "currentBall": self.current_ball,
            "currentBowler": self.current_bowler,
            "onStrike": self.on_strike,
            "offStrike": self.off_strike,
            "totalRuns": self.total_runs,
            "wickets": self.wickets,
            "oversCompleted": self.overs_completed,
            "ballsInCurrentOver": self.balls_in_current_over,
            "isFreeHitPending": self.is_free_hit_pending,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "InningsSnapshot":
        version = payload.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            msg = f"unsupported innings snapshot version {version}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.INCONSISTENT_STATE)
        try:
            return cls(
                batting_team=payload["battingTeam"],
                bowling_team=payload["bowlingTeam"],
                batting_players=tuple(payload.get("battingTeamPlayers", ())),
                bowling_players=tuple(payload.get("bowlingTeamPlayers", ())),
                on_strike=payload["onStrike"],
                off_strike=payload["offStrike"],
                current_bowler=payload.get("currentBowler") or "",
                balls=tuple(Ball.from_dict(b) for b in payload.get("balls", ())),
                current_over=payload["currentOver"],
                current_ball=payload["currentBall"],
                total_runs=payload["totalRuns"],
                wickets=payload["wickets"],
                overs_completed=payload["oversCompleted"],
                balls_in_current_over=payload["ballsInCurrentOver"],
                is_free_hit_pending=payload["isFreeHitPending"],
                version=version,
            )
        except (KeyError, ValueError) as e:
            msg = f"malformed innings snapshot: {e}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.INCONSISTENT_STATE)


def create_innings(
    batting_team: str,
    bowling_team: str,
    batting_players: Iterable[str],
    bowling_players: Iterable[str],
    on_strike: str,
    off_strike: str,
    bowler: str,
    over_number: int = 1,
) -> InningsSnapshot:
    if on_strike == off_strike:
        msg = f"openers must be two different players, got {on_strike} twice"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    return InningsSnapshot(
        batting_team=batting_team,
        bowling_team=bowling_team,
        batting_players=tuple(batting_players),
        bowling_players=tuple(bowling_players),
        on_strike=on_strike,
        off_strike=off_strike,
        current_bowler=bowler,
        current_over=over_number,
    )


def next_batter(
    roster: Iterable[str], dismissed: Iterable[str], at_crease: Iterable[str]
) -> Optional[str]:
    """First roster player neither dismissed nor batting; None means all out."""
    unavailable = set(dismissed) | set(at_crease)
    for player in roster:
        if player not in unavailable:
            return player
    return None


def is_innings_complete(snapshot: InningsSnapshot, total_overs: int) -> bool:
    if snapshot.wickets >= MAX_WICKETS:
        return True
    return snapshot.overs_completed >= total_overs


def innings_state(snapshot: InningsSnapshot, total_overs: int) -> InningsState:
    if snapshot.wickets >= MAX_WICKETS:
        return InningsState.ALL_OUT
    if snapshot.overs_completed >= total_overs:
        return InningsState.OVERS_COMPLETE
    return InningsState.IN_PROGRESS
