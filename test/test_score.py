import pytest

from scorebook.delivery import add_no_ball, add_runs, add_wicket, add_wide
from scorebook.over import start_new_over
from scorebook.score import (
    batting_stats,
    bowler_ball_details,
    bowling_stats,
    bowlers_in_order,
    extras_summary,
    fall_of_wickets,
    score_display,
    scorecard,
)
from test.common import apply_runs, bowl_over


@pytest.fixture
def two_overs(snapshot):
    snapshot = add_runs(snapshot, 1)
    snapshot = add_wide(snapshot)
    snapshot = add_runs(snapshot, 4)
    snapshot = add_wicket(snapshot, {"type": "bowled"})
    snapshot = add_no_ball(snapshot)
    snapshot = apply_runs(snapshot, [0, 0, 0])
    snapshot = start_new_over(snapshot, "Y")
    snapshot = add_runs(snapshot, 6)
    snapshot = add_wicket(snapshot, {"type": "caught", "fielder": "Z"})
    snapshot = add_runs(snapshot, 2)
    return snapshot


def test_maiden_over(snapshot):
    snapshot = bowl_over(snapshot)
    stats = bowling_stats(snapshot, "X")
    assert stats.maidens == 1
    assert stats.overs == 1.0
    assert stats.overs_display == "1.0"
    assert stats.economy == "0.00"
    assert stats.runs == 0
    assert stats.wickets == 0


def test_extras_spoil_maiden(snapshot):
    snapshot = add_wide(snapshot)
    snapshot = bowl_over(snapshot)
    stats = bowling_stats(snapshot, "X")
    assert stats.maidens == 0
    assert stats.runs == 1
    assert stats.legal_balls == 6


def test_cricket_overs_notation(snapshot):
    for _ in range(4):
        snapshot = start_new_over(bowl_over(snapshot), "X")
    snapshot = apply_runs(snapshot, [1, 1, 1, 1, 1])
    stats = bowling_stats(snapshot, "X")
    assert stats.legal_balls == 29
    assert stats.overs == 4.5
    assert stats.overs_display == "4.5"
    assert stats.maidens == 4
    assert stats.economy == "1.11"


def test_batting_stats(snapshot):
    snapshot = apply_runs(snapshot, [4, 6, 1])
    stats = batting_stats(snapshot, "A")
    assert stats.runs == 11
    assert stats.balls == 3
    assert stats.fours == 1
    assert stats.sixes == 1
    assert stats.strike_rate == "366.67"
    assert batting_stats(snapshot, "C").strike_rate == "0.00"


def test_dismissal_ball_not_faced(two_overs):
    stats = batting_stats(two_overs, "B")
    # the wide and no-ball are not legal, the wicket ball is not counted
    assert stats.balls == 1
    assert stats.runs == 4


def test_bowling_stats(two_overs):
    x = bowling_stats(two_overs, "X")
    assert x.runs == 7
    assert x.wickets == 1
    assert x.legal_balls == 6
    assert x.economy == "7.00"
    y = bowling_stats(two_overs, "Y")
    assert y.runs == 8
    assert y.wickets == 1
    assert y.overs_display == "0.3"


def test_run_out_not_credited(snapshot):
    snapshot = add_wicket(snapshot, {"type": "runOut", "fielder": "Z"})
    assert bowling_stats(snapshot, "X").wickets == 0


def test_bowler_ball_details(two_overs):
    assert bowler_ball_details(two_overs, "X") == "1, WD, 4, W, NB, 0, 0, 0"
    assert bowler_ball_details(two_overs, "Y") == "6, W, 2"
    assert bowler_ball_details(two_overs, "Z") == "-"


def test_ball_details_across_overs(snapshot):
    snapshot = bowl_over(snapshot, (1, 2, 3, 4, 6, 0))
    snapshot = start_new_over(snapshot, "Y")
    snapshot = bowl_over(snapshot)
    snapshot = start_new_over(snapshot, "X")
    snapshot = add_wide(snapshot)
    assert bowler_ball_details(snapshot, "X") == "1, 2, 3, 4, 6, 0 | WD"


def test_fall_of_wickets(two_overs):
    fallen = fall_of_wickets(two_overs)
    assert [f.wicket_number for f in fallen] == [2, 1]
    latest, first = fallen
    assert first.score == 6
    assert first.batsman == "B"
    assert first.how_out == "b X"
    assert latest.score == 13
    assert latest.how_out == "c Z b Y"


def test_score_display(two_overs):
    assert score_display(two_overs) == "15/2 in 1.3 overs"


def test_extras_summary(two_overs):
    extras = extras_summary(two_overs)
    assert extras.wides == 1
    assert extras.no_balls == 1
    assert extras.total == 2


def test_bowlers_in_order(two_overs):
    assert bowlers_in_order(two_overs) == ["X", "Y"]


def test_scorecard(two_overs):
    card = scorecard(two_overs)
    assert card["score"] == "15/2 in 1.3 overs"
    rows = {row["player"]: row for row in card["batting"]}
    assert rows["B"]["status"] == "b X"
    assert rows["A"]["status"] == "c Z b Y"
    assert rows["C"]["status"] == "not out"
    assert rows["K"]["status"] == "did not bat"
    assert rows["C"]["at_crease"]
    assert not rows["A"]["at_crease"]
    assert [row["bowler"] for row in card["bowling"]] == ["X", "Y"]
    assert card["bowling"][1]["bowling"]
    assert card["extras"]["total"] == 2
    assert card["fall_of_wickets"][0]["wicket_number"] == 2


def test_statistics_are_pure(two_overs):
    assert scorecard(two_overs) == scorecard(two_overs)
    assert fall_of_wickets(two_overs) == fall_of_wickets(two_overs)
