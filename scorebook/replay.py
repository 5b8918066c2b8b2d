"""
Undo by replay. Aggregate counters are never reversed incrementally: the log
is folded again from an empty innings and the counters are taken from the fold.
"""
from dataclasses import replace
from typing import Iterable, NamedTuple

from scorebook.ball import Ball
from scorebook.definitions.delivery import BALLS_PER_OVER
from scorebook.error import EngineError, RejectReason
from scorebook.innings import InningsSnapshot
from scorebook.util import LOGGER
from scorebook.validators import can_undo


class LogTally(NamedTuple):
    total_runs: int = 0
    wickets: int = 0
    overs_completed: int = 0
    balls_in_current_over: int = 0
    current_ball: int = 1


def tally_log(balls: Iterable[Ball]) -> LogTally:
    total_runs = 0
    wickets = 0
    overs_completed = 0
    balls_in_current_over = 0
    current_ball = 1
    for ball in balls:
        total_runs += ball.runs
        if ball.wicket:
            wickets += 1
        if not ball.legal_ball:
            current_ball = ball.ball
            continue
        balls_in_current_over += 1
        if balls_in_current_over == BALLS_PER_OVER:
            overs_completed += 1
            balls_in_current_over = 0
            current_ball = 1
        else:
            current_ball = ball.ball + 1
    return LogTally(
        total_runs, wickets, overs_completed, balls_in_current_over, current_ball
    )


def undo_last_ball(snapshot: InningsSnapshot) -> InningsSnapshot:
    validation = can_undo(snapshot)
    if not validation:
        LOGGER.warning(validation.error)
        raise EngineError(validation.error, RejectReason.ILLEGAL_OPERATION)
    removed = snapshot.balls[-1]
    remaining = snapshot.balls[:-1]
    tally = tally_log(remaining)
    # the flag that preceded a no-ball is not recorded anywhere, so it is lost
    is_free_hit = False if removed.is_no_ball else removed.is_free_hit
    LOGGER.info(f"undo {removed.symbol} at {removed.over}.{removed.ball}")
    return replace(
        snapshot,
        balls=remaining,
        total_runs=tally.total_runs,
        wickets=tally.wickets,
        overs_completed=tally.overs_completed,
        balls_in_current_over=tally.balls_in_current_over,
        current_ball=tally.current_ball,
        current_bowler=removed.bowler,
        on_strike=removed.on_strike or snapshot.on_strike,
        off_strike=removed.off_strike or snapshot.off_strike,
        is_free_hit_pending=is_free_hit,
    )


def check_consistency(snapshot: InningsSnapshot):
    tally = tally_log(snapshot.balls)
    stored = LogTally(
        snapshot.total_runs,
        snapshot.wickets,
        snapshot.overs_completed,
        snapshot.balls_in_current_over,
        snapshot.current_ball,
    )
    mismatched = [
        name
        for name, expected, actual in zip(LogTally._fields, tally, stored)
        if expected != actual
    ]
    if mismatched:
        msg = (
            f"innings snapshot disagrees with its ball log on "
            f"{', '.join(mismatched)}"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.INCONSISTENT_STATE)
