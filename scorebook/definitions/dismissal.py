from dataclasses import dataclass


@dataclass(frozen=True)
class DismissalType:
    name: str
    shortcode: str
    bowler_accredited: bool


BOWLED = DismissalType("bowled", "bowled", True)
CAUGHT = DismissalType("caught", "caught", True)
RUN_OUT = DismissalType("run out", "runOut", False)
LBW = DismissalType("leg before wicket", "lbw", True)
STUMPED = DismissalType("stumped", "stumped", True)
HIT_WICKET = DismissalType("hit wicket", "hitWicket", True)
RETIRED_HURT = DismissalType("retired hurt", "retiredHurt", False)

_dismissal_types = {
    "bowled": BOWLED,
    "caught": CAUGHT,
    "runOut": RUN_OUT,
    "lbw": LBW,
    "stumped": STUMPED,
    "hitWicket": HIT_WICKET,
    "retiredHurt": RETIRED_HURT,
}


def get_dismissal_type(shortcode: str) -> DismissalType:
    if shortcode not in _dismissal_types:
        raise ValueError(f"invalid dismissal type {shortcode}")
    return _dismissal_types[shortcode]


def get_all_shortcodes() -> list[str]:
    return list(_dismissal_types.keys())
