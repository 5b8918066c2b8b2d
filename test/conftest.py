import pytest

from scorebook.engine import ScoringEngine
from scorebook.innings import create_innings
from scorebook.store import MatchRepository, MemoryStore
from test.common import Command, make_match_config
from test.resources import TEAM_A_PLAYERS, TEAM_B_PLAYERS


@pytest.fixture
def snapshot():
    return create_innings(
        "teamA", "teamB", TEAM_A_PLAYERS, TEAM_B_PLAYERS, "A", "B", "X"
    )


@pytest.fixture
def match_config():
    return make_match_config()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store):
    return ScoringEngine(MatchRepository(store), default_total_overs=2)


@pytest.fixture
def command():
    return Command()


@pytest.fixture
def started_engine(engine, command, match_config):
    engine.on_command(command("ms", **match_config.to_dict()))
    engine.on_command(
        command("is", on_strike="A", off_strike="B", bowler="X")
    )
    return engine
