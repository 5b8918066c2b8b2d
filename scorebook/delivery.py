"""
Delivery transitions: each function folds one delivery onto an innings snapshot and
returns the new snapshot. Inputs are never mutated, so a rejected delivery leaves
the caller's snapshot exactly as it was.
"""
from dataclasses import replace
from typing import Optional, Union

import scorebook.util as util
from scorebook.ball import create_ball
from scorebook.definitions.delivery import (
    BALLS_PER_OVER,
    EXTRA_RUNS,
    MAX_WICKETS,
    Extras,
)
from scorebook.dismissal import Wicket, parse_wicket
from scorebook.error import EngineError, RejectReason
from scorebook.innings import InningsSnapshot, next_batter
from scorebook.util import LOGGER
from scorebook.validators import can_add_ball, can_take_wicket, is_valid_run

WicketInfo = Union[Wicket, dict]


def add_runs(
    snapshot: InningsSnapshot, runs: int, batsman: Optional[str] = None
) -> InningsSnapshot:
    check_runs(runs)
    check_delivery(snapshot)
    batsman = batsman or snapshot.on_strike
    ball = create_ball(snapshot, runs, batsman)
    updated = replace(
        snapshot,
        balls=snapshot.balls + (ball,),
        total_runs=snapshot.total_runs + runs,
        balls_in_current_over=snapshot.balls_in_current_over + 1,
        is_free_hit_pending=False,
    )
    updated = rotate_strike(updated, runs)
    return advance(updated)


def add_wide(
    snapshot: InningsSnapshot, batsman: Optional[str] = None
) -> InningsSnapshot:
    check_delivery(snapshot)
    batsman = batsman or snapshot.on_strike
    ball = create_ball(snapshot, EXTRA_RUNS, batsman, extras=Extras.WIDE)
    return replace(
        snapshot,
        balls=snapshot.balls + (ball,),
        total_runs=snapshot.total_runs + EXTRA_RUNS,
        is_free_hit_pending=False,
    )


def add_no_ball(
    snapshot: InningsSnapshot, batsman: Optional[str] = None
) -> InningsSnapshot:
    check_delivery(snapshot)
    batsman = batsman or snapshot.on_strike
    ball = create_ball(snapshot, EXTRA_RUNS, batsman, extras=Extras.NO_BALL)
    return replace(
        snapshot,
        balls=snapshot.balls + (ball,),
        total_runs=snapshot.total_runs + EXTRA_RUNS,
        is_free_hit_pending=True,
    )


def add_wicket(
    snapshot: InningsSnapshot,
    wicket_info: WicketInfo,
    next_player: Optional[str] = None,
) -> InningsSnapshot:
    check_delivery(snapshot)
    wicket = check_wicket(snapshot, wicket_info, next_player)
    ball = create_ball(snapshot, 0, wicket.batsman, wicket=wicket)
    updated = replace(
        snapshot,
        balls=snapshot.balls + (ball,),
        wickets=snapshot.wickets + 1,
        balls_in_current_over=snapshot.balls_in_current_over + 1,
        is_free_hit_pending=False,
    )
    updated = replace_dismissed(updated, wicket.batsman, next_player)
    return advance(updated)


def add_runs_with_wicket(
    snapshot: InningsSnapshot,
    runs: int,
    wicket_info: WicketInfo,
    next_player: Optional[str] = None,
) -> InningsSnapshot:
    check_runs(runs)
    check_delivery(snapshot)
    wicket = check_wicket(snapshot, wicket_info, next_player)
    ball = create_ball(snapshot, runs, wicket.batsman, wicket=wicket)
    updated = replace(
        snapshot,
        balls=snapshot.balls + (ball,),
        total_runs=snapshot.total_runs + runs,
        wickets=snapshot.wickets + 1,
        balls_in_current_over=snapshot.balls_in_current_over + 1,
        is_free_hit_pending=False,
    )
    # runs are credited before the dismissal, so the batsmen may have crossed
    updated = rotate_strike(updated, runs)
    updated = replace_dismissed(updated, wicket.batsman, next_player)
    return advance(updated)


def complete_over(snapshot: InningsSnapshot) -> InningsSnapshot:
    """
    Close the current over. ``current_over`` is left alone until the next bowler
    is chosen by ``start_new_over``, so a closed over with no bowler is the
    "waiting for bowler" state.
    """
    on_strike, off_strike = util.switch_strike(snapshot.on_strike, snapshot.off_strike)
    LOGGER.info(
        f"over {snapshot.current_over} completed, "
        f"{snapshot.total_runs}/{snapshot.wickets}"
    )
    return replace(
        snapshot,
        overs_completed=snapshot.overs_completed + 1,
        balls_in_current_over=0,
        current_ball=1,
        current_bowler="",
        on_strike=on_strike,
        off_strike=off_strike,
    )


def check_runs(runs: int):
    if not is_valid_run(runs):
        msg = f"invalid run value: {runs}. Must be 0, 1, 2, 3, 4 or 6"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)


def check_delivery(snapshot: InningsSnapshot):
    validation = can_add_ball(snapshot, snapshot.current_over, snapshot.current_ball)
    if not validation:
        LOGGER.warning(validation.error)
        raise EngineError(validation.error, RejectReason.ILLEGAL_OPERATION)
    if snapshot.needs_bowler:
        msg = "a bowler must be selected before the next delivery"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)


def check_wicket(
    snapshot: InningsSnapshot, wicket_info: WicketInfo, next_player: Optional[str]
) -> Wicket:
    if snapshot.wickets >= MAX_WICKETS:
        msg = f"all {MAX_WICKETS} wickets have already fallen"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    wicket = parse_wicket(wicket_info, snapshot)
    if not can_take_wicket(snapshot.is_free_hit_pending, wicket.dismissal_type):
        msg = (
            f"cannot take {wicket.dismissal_type.shortcode} on a free hit. "
            f"Only run out is allowed"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    if next_player is not None:
        if next_player in snapshot.at_crease:
            msg = f"next batsman {next_player} is already at the crease"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        if next_player in snapshot.dismissed_batsmen:
            msg = f"next batsman {next_player} has already been dismissed"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
    return wicket


def rotate_strike(snapshot: InningsSnapshot, runs: int) -> InningsSnapshot:
    if runs % 2 == 0:
        return snapshot
    on_strike, off_strike = util.switch_strike(snapshot.on_strike, snapshot.off_strike)
    return replace(snapshot, on_strike=on_strike, off_strike=off_strike)


def replace_dismissed(
    snapshot: InningsSnapshot, dismissed: str, next_player: Optional[str]
) -> InningsSnapshot:
    if next_player is None:
        next_player = next_batter(
            snapshot.batting_players, snapshot.dismissed_batsmen, snapshot.at_crease
        )
    if next_player is None:
        LOGGER.info(f"no batsman left to replace {dismissed}, all out")
        return snapshot
    if snapshot.on_strike == dismissed:
        return replace(snapshot, on_strike=next_player)
    if snapshot.off_strike == dismissed:
        return replace(snapshot, off_strike=next_player)
    return snapshot


def advance(snapshot: InningsSnapshot) -> InningsSnapshot:
    if snapshot.balls_in_current_over == BALLS_PER_OVER:
        return complete_over(snapshot)
    return replace(snapshot, current_ball=snapshot.current_ball + 1)
