import os

from scorebook.delivery import add_runs
from scorebook.definitions.match import TossChoice
from scorebook.innings import InningsSnapshot
from scorebook.match import create_match_config
from test.resources import TEAM_A, TEAM_A_PLAYERS, TEAM_B, TEAM_B_PLAYERS

RESOURCES_PATH = os.path.join(os.path.dirname(__file__), "resources")
TEST_CONFIG_PATH = os.path.join(RESOURCES_PATH, "test_config.ini")


def make_match_config(total_overs: int = 2):
    return create_match_config(
        TEAM_A,
        TEAM_A_PLAYERS,
        TEAM_B,
        TEAM_B_PLAYERS,
        total_overs=total_overs,
        toss_winner="teamA",
        toss_choice=TossChoice.BAT,
    )


def apply_runs(snapshot: InningsSnapshot, runs: list) -> InningsSnapshot:
    for r in runs:
        snapshot = add_runs(snapshot, r)
    return snapshot


def bowl_over(
    snapshot: InningsSnapshot, runs=(0, 0, 0, 0, 0, 0)
) -> InningsSnapshot:
    """bowl six legal balls with the current bowler"""
    return apply_runs(snapshot, list(runs))


class Command:
    """builds sequenced engine commands"""

    def __init__(self):
        self.command_id = 0

    def __call__(self, event: str, **body) -> dict:
        command = {"event": event, "command_id": self.command_id, "body": body}
        self.command_id += 1
        return command
