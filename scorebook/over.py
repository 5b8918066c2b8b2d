from dataclasses import replace

import scorebook.util as util
from scorebook.definitions.delivery import BALLS_PER_OVER
from scorebook.delivery import complete_over
from scorebook.error import EngineError, RejectReason
from scorebook.innings import InningsSnapshot
from scorebook.util import LOGGER
from scorebook.validators import validate_bowler


def start_new_over(snapshot: InningsSnapshot, bowler: str) -> InningsSnapshot:
    """
    Hand the ball to ``bowler`` for the next over.

    The usual path is the state left behind by ``complete_over``: ball 1, nothing
    bowled, over closed. Strike has already been swapped there, so it is not
    swapped again. A snapshot still holding a full over (six legal balls not yet
    completed) is closed and advanced in one step instead.
    """
    validation = validate_bowler(bowler, snapshot.bowling_players)
    if not validation:
        LOGGER.warning(validation.error)
        raise EngineError(validation.error, RejectReason.BAD_COMMAND)

    if (
        snapshot.balls_in_current_over == 0
        and snapshot.current_ball == 1
        and snapshot.over_closed
    ):
        LOGGER.info(f"over {snapshot.current_over + 1} started, {bowler} bowling")
        return replace(
            snapshot, current_bowler=bowler, current_over=snapshot.current_over + 1
        )

    if snapshot.balls_in_current_over != BALLS_PER_OVER:
        msg = (
            f"cannot start a new over: over {snapshot.current_over} is not "
            f"complete ({snapshot.balls_in_current_over} legal balls bowled)"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)

    on_strike, off_strike = util.switch_strike(snapshot.on_strike, snapshot.off_strike)
    LOGGER.info(f"over {snapshot.current_over + 1} started, {bowler} bowling")
    return replace(
        snapshot,
        current_bowler=bowler,
        current_over=snapshot.current_over + 1,
        current_ball=1,
        balls_in_current_over=0,
        overs_completed=snapshot.overs_completed + 1,
        on_strike=on_strike,
        off_strike=off_strike,
    )


def end_over(snapshot: InningsSnapshot) -> InningsSnapshot:
    if snapshot.balls_in_current_over < BALLS_PER_OVER:
        msg = (
            f"cannot end over {snapshot.current_over}: only "
            f"{snapshot.balls_in_current_over} legal balls bowled"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    return complete_over(snapshot)
