from dataclasses import dataclass
from typing import Optional

from scorebook.definitions.delivery import Extras
from scorebook.dismissal import Wicket


@dataclass(frozen=True)
class Ball:
    over: int
    ball: int
    runs: int
    extras: Extras
    wicket: Optional[Wicket]
    batsman: str
    bowler: str
    is_free_hit: bool
    legal_ball: bool
    # crease at the moment of delivery, undo restores strike from these
    on_strike: str = ""
    off_strike: str = ""

    @property
    def is_wide(self) -> bool:
        return self.extras == Extras.WIDE

    @property
    def is_no_ball(self) -> bool:
        return self.extras == Extras.NO_BALL

    @property
    def symbol(self) -> str:
        if self.wicket:
            return "W"
        elif self.is_wide:
            return "WD"
        elif self.is_no_ball:
            return "NB"
        return str(self.runs)

    def to_dict(self) -> dict:
        return {
            "over": self.over,
            "ball": self.ball,
            "runs": self.runs,
            "extras": self.extras.value,
            "wicket": self.wicket.to_dict() if self.wicket else None,
            "batsman": self.batsman,
            "bowler": self.bowler,
            "isFreeHit": self.is_free_hit,
            "legalBall": self.legal_ball,
            "onStrike": self.on_strike,
            "offStrike": self.off_strike,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Ball":
        wicket = payload.get("wicket")
        return cls(
            over=payload["over"],
            ball=payload["ball"],
            runs=payload["runs"],
            extras=Extras(payload.get("extras") or Extras.NONE.value),
            wicket=Wicket.from_dict(wicket) if wicket else None,
            batsman=payload["batsman"],
            bowler=payload["bowler"],
            is_free_hit=payload["isFreeHit"],
            legal_ball=payload["legalBall"],
            on_strike=payload.get("onStrike", ""),
            off_strike=payload.get("offStrike", ""),
        )


def create_ball(
    snapshot: "InningsSnapshot",
    runs: int,
    batsman: str,
    extras: Extras = Extras.NONE,
    wicket: Optional[Wicket] = None,
) -> Ball:
    """
    Record one delivery at the snapshot's current position. Legality follows the
    extras kind: wides and no-balls never count towards the over.
    """
    return Ball(
        over=snapshot.current_over,
        ball=snapshot.current_ball,
        runs=runs,
        extras=extras,
        wicket=wicket,
        batsman=batsman,
        bowler=snapshot.current_bowler,
        is_free_hit=snapshot.is_free_hit_pending,
        legal_ball=extras == Extras.NONE,
        on_strike=snapshot.on_strike,
        off_strike=snapshot.off_strike,
    )
