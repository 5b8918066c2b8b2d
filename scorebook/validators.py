from typing import NamedTuple, Optional, Sequence

from scorebook.definitions.delivery import BALLS_PER_OVER, VALID_RUNS
from scorebook.definitions.dismissal import RUN_OUT, get_all_shortcodes
from scorebook.definitions.match import TEAM_KEYS, TossChoice


class Validation(NamedTuple):
    valid: bool
    error: Optional[str] = None

    def __bool__(self):
        return self.valid


VALID = Validation(True)


def is_valid_run(runs) -> bool:
    # bool is an int subclass, True must not count as a single
    if isinstance(runs, bool) or not isinstance(runs, int):
        return False
    return runs in VALID_RUNS


def is_valid_wicket_type(type_code) -> bool:
    return type_code in get_all_shortcodes()


def can_take_wicket(is_free_hit: bool, type_code) -> bool:
    shortcode = getattr(type_code, "shortcode", type_code)
    if is_free_hit:
        return shortcode == RUN_OUT.shortcode
    return True


def can_add_ball(snapshot: "InningsSnapshot", over: int, ball: int) -> Validation:
    if over != snapshot.current_over:
        return Validation(False, "can only add balls to the current over")
    if snapshot.balls_in_current_over >= BALLS_PER_OVER:
        return Validation(False, "current over is complete")
    return VALID


def can_undo(snapshot: "InningsSnapshot") -> Validation:
    if not snapshot.balls:
        return Validation(False, "no balls to undo")
    if snapshot.balls[-1].over != snapshot.current_over:
        return Validation(False, "can only undo balls from the current over")
    return VALID


def validate_bowler(bowler: str, bowling_players: Sequence[str]) -> Validation:
    if not bowler or not bowler.strip():
        return Validation(False, "bowler must be selected")
    if bowling_players and bowler not in bowling_players:
        return Validation(False, f"bowler {bowler} is not in the bowling team")
    return VALID


def validate_match_setup(config: "MatchConfig") -> Validation:
    if not config.total_overs or config.total_overs < 1:
        return Validation(False, "total overs must be at least 1")
    for team_key in TEAM_KEYS:
        if not config.teams[team_key].players:
            return Validation(False, f"{team_key} must have at least one player")
    return VALID


def validate_toss(config: "MatchConfig") -> Validation:
    if config.toss.winner not in TEAM_KEYS:
        return Validation(False, "toss winner must be selected")
    if not isinstance(config.toss.choice, TossChoice):
        return Validation(False, "toss choice must be selected")
    return VALID


def validate_innings_start(config: "MatchConfig") -> Validation:
    setup = validate_match_setup(config)
    if not setup:
        return setup
    return validate_toss(config)
