"""
Statistics derived from an innings' ball log. Nothing here is cached on the
snapshot: every figure is folded from ``snapshot.balls`` on each call.
"""
from dataclasses import asdict, dataclass
from typing import List, NamedTuple

import scorebook.util as util
from scorebook.definitions.delivery import BALLS_PER_OVER
from scorebook.innings import InningsSnapshot


@dataclass(frozen=True)
class BattingStats:
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    strike_rate: str = "0.00"


@dataclass(frozen=True)
class BowlingStats:
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0
    maidens: int = 0
    economy: str = "0.00"

    @property
    def overs(self) -> float:
        return util.cricket_overs(self.legal_balls)

    @property
    def overs_display(self) -> str:
        return util.balls_to_overs(self.legal_balls)


class FallOfWicket(NamedTuple):
    wicket_number: int
    score: int
    batsman: str
    how_out: str


class ExtrasSummary(NamedTuple):
    wides: int = 0
    wide_runs: int = 0
    no_balls: int = 0
    no_ball_runs: int = 0

    @property
    def total(self) -> int:
        return self.wide_runs + self.no_ball_runs


def batting_stats(snapshot: InningsSnapshot, player: str) -> BattingStats:
    # dismissal deliveries do not count as balls faced
    faced = [
        ball
        for ball in snapshot.balls
        if ball.batsman == player and ball.legal_ball and not ball.wicket
    ]
    runs = sum(ball.runs for ball in faced)
    return BattingStats(
        runs=runs,
        balls=len(faced),
        fours=sum(1 for ball in faced if ball.runs == 4),
        sixes=sum(1 for ball in faced if ball.runs == 6),
        strike_rate=util.two_decimals(runs, len(faced), scale=100),
    )


def bowling_stats(snapshot: InningsSnapshot, bowler: str) -> BowlingStats:
    runs = 0
    wickets = 0
    legal_balls = 0
    per_over = {}
    for ball in snapshot.balls:
        if ball.bowler != bowler:
            continue
        runs += ball.runs
        if ball.wicket and ball.wicket.bowler_accredited:
            wickets += 1
        over_legal, over_runs = per_over.get(ball.over, (0, 0))
        if ball.legal_ball:
            legal_balls += 1
            over_legal += 1
        per_over[ball.over] = (over_legal, over_runs + ball.runs)
    maidens = sum(
        1
        for over_legal, over_runs in per_over.values()
        if over_legal == BALLS_PER_OVER and over_runs == 0
    )
    return BowlingStats(
        runs=runs,
        wickets=wickets,
        legal_balls=legal_balls,
        maidens=maidens,
        economy=util.two_decimals(runs, util.cricket_overs(legal_balls)),
    )


def bowler_ball_details(snapshot: InningsSnapshot, bowler: str) -> str:
    overs = {}
    for ball in snapshot.balls:
        if ball.bowler == bowler:
            overs.setdefault(ball.over, []).append(ball)
    if not overs:
        return "-"
    return " | ".join(
        ", ".join(ball.symbol for ball in sorted(overs[over], key=lambda b: b.ball))
        for over in sorted(overs)
    )


def fall_of_wickets(snapshot: InningsSnapshot) -> List[FallOfWicket]:
    fallen = []
    running_score = 0
    for ball in snapshot.balls:
        running_score += ball.runs
        if ball.wicket:
            fallen.append(
                FallOfWicket(
                    len(fallen) + 1,
                    running_score,
                    ball.wicket.batsman,
                    ball.wicket.scorecard_format,
                )
            )
    fallen.reverse()
    return fallen


def score_display(snapshot: InningsSnapshot) -> str:
    return (
        f"{snapshot.total_runs}/{snapshot.wickets} in "
        f"{snapshot.overs_completed}.{snapshot.balls_in_current_over} overs"
    )


def extras_summary(snapshot: InningsSnapshot) -> ExtrasSummary:
    wides = [ball for ball in snapshot.balls if ball.is_wide]
    no_balls = [ball for ball in snapshot.balls if ball.is_no_ball]
    return ExtrasSummary(
        len(wides),
        sum(ball.runs for ball in wides),
        len(no_balls),
        sum(ball.runs for ball in no_balls),
    )


def bowlers_in_order(snapshot: InningsSnapshot) -> List[str]:
    bowlers = []
    for ball in snapshot.balls:
        if ball.bowler not in bowlers:
            bowlers.append(ball.bowler)
    return bowlers


def batting_status(snapshot: InningsSnapshot, player: str) -> str:
    for ball in snapshot.balls:
        if ball.wicket and ball.wicket.batsman == player:
            return ball.wicket.scorecard_format
    if player in snapshot.at_crease or any(
        ball.batsman == player for ball in snapshot.balls
    ):
        return "not out"
    return "did not bat"


def scorecard(snapshot: InningsSnapshot) -> dict:
    batting = []
    for player in snapshot.batting_players:
        row = {"player": player, "status": batting_status(snapshot, player)}
        row.update(asdict(batting_stats(snapshot, player)))
        row["at_crease"] = player in snapshot.at_crease
        batting.append(row)
    bowling = []
    for bowler in bowlers_in_order(snapshot):
        stats = bowling_stats(snapshot, bowler)
        bowling.append(
            {
                "bowler": bowler,
                "overs": stats.overs_display,
                "maidens": stats.maidens,
                "runs": stats.runs,
                "wickets": stats.wickets,
                "economy": stats.economy,
                "ball_details": bowler_ball_details(snapshot, bowler),
                "bowling": bowler == snapshot.current_bowler,
            }
        )
    extras = extras_summary(snapshot)
    return {
        "batting_team": snapshot.batting_team,
        "bowling_team": snapshot.bowling_team,
        "score": score_display(snapshot),
        "batting": batting,
        "bowling": bowling,
        "extras": dict(extras._asdict(), total=extras.total),
        "fall_of_wickets": [fow._asdict() for fow in fall_of_wickets(snapshot)],
    }
