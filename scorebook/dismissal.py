from dataclasses import dataclass
from typing import Optional, Union

from scorebook.definitions.dismissal import (
    DismissalType,
    get_dismissal_type,
    BOWLED,
    CAUGHT,
    RUN_OUT,
    LBW,
    STUMPED,
    HIT_WICKET,
    RETIRED_HURT,
)
from scorebook.error import EngineError, RejectReason
from scorebook.util import LOGGER
from scorebook.validators import is_valid_wicket_type


@dataclass(frozen=True)
class Wicket:
    dismissal_type: DismissalType
    batsman: str
    bowler: Optional[str] = None
    fielder: Optional[str] = None

    @property
    def bowler_accredited(self) -> bool:
        return self.dismissal_type.bowler_accredited

    @property
    def fielder_name(self) -> str:
        return self.fielder or "sub"

    @property
    def scorecard_format(self) -> str:
        if self.dismissal_type == BOWLED:
            return f"b {self.bowler}"
        elif self.dismissal_type == CAUGHT:
            return f"c {self.fielder_name} b {self.bowler}"
        elif self.dismissal_type == RUN_OUT:
            return f"run out ({self.fielder_name})"
        elif self.dismissal_type == LBW:
            return f"lbw b {self.bowler}"
        elif self.dismissal_type == STUMPED:
            return f"st {self.fielder_name} b {self.bowler}"
        elif self.dismissal_type == HIT_WICKET:
            return f"hit wicket b {self.bowler}"
        elif self.dismissal_type == RETIRED_HURT:
            return "retired hurt"
        return self.dismissal_type.shortcode

    def to_dict(self) -> dict:
        return {
            "type": self.dismissal_type.shortcode,
            "batsman": self.batsman,
            "bowler": self.bowler,
            "fielder": self.fielder,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Wicket":
        return cls(
            get_dismissal_type(payload["type"]),
            payload["batsman"],
            payload.get("bowler"),
            payload.get("fielder"),
        )


def parse_wicket(
    wicket_info: Union[Wicket, dict], snapshot: "InningsSnapshot"
) -> Wicket:
    """
    Build a Wicket from a caller payload ({"type", "batsman", "bowler", "fielder"})
    against the current crease. The striker is implied when no batsman is given,
    and bowler-credited dismissals default to the current bowler.
    """
    if isinstance(wicket_info, Wicket):
        wicket = wicket_info
    else:
        type_code = wicket_info.get("type")
        if not is_valid_wicket_type(type_code):
            msg = f"invalid wicket type {type_code}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        dt = get_dismissal_type(type_code)
        batsman = wicket_info.get("batsman") or snapshot.on_strike
        bowler = None
        if dt.bowler_accredited:
            bowler = wicket_info.get("bowler") or snapshot.current_bowler
        wicket = Wicket(dt, batsman, bowler, wicket_info.get("fielder"))
    if wicket.batsman not in (snapshot.on_strike, snapshot.off_strike):
        msg = (
            f"batsman specified in dismissal {wicket.dismissal_type.name}: "
            f"{wicket.batsman} is not currently at the crease"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    return wicket
