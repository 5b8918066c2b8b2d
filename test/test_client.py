import json
from collections import deque
from configparser import ConfigParser
from io import StringIO

import pytest

from scorebook.client import client
from scorebook.client.client import EngineClient, FileHandler
from scorebook.client.reader import json_reader, plain_reader
from scorebook.error import RejectReason


def innings_commands(match_config) -> list:
    return [
        {"event": "ms", "body": match_config.to_dict()},
        {"event": "is", "body": {"on_strike": "A", "off_strike": "B", "bowler": "X"}},
        {"event": "r", "body": {"runs": 1}},
        {"event": "nb", "body": {}},
        {"event": "r", "body": {"runs": 4}},
    ]


def handler_config(url, reader="json") -> ConfigParser:
    config = ConfigParser()
    config.read_dict({"FILE_HANDLER": {"url": str(url), "reader": reader}})
    return config


@pytest.fixture
def json_commands(tmp_path, match_config):
    url = tmp_path / "commands.json"
    url.write_text(json.dumps(innings_commands(match_config)))
    return url


@pytest.fixture
def plain_commands(tmp_path, match_config):
    url = tmp_path / "commands.txt"
    lines = [json.dumps(command) for command in innings_commands(match_config)]
    url.write_text("\n\n".join(lines) + "\n")
    return url


def test_json_reader():
    buffer = deque()
    json_reader(StringIO('[{"event": "r"}, {"event": "wd"}]'), buffer)
    assert list(buffer) == [{"event": "r"}, {"event": "wd"}]


def test_plain_reader():
    buffer = deque()
    plain_reader(StringIO('{"event": "r"}\n\n{"event": "u"}\n'), buffer)
    assert list(buffer) == [{"event": "r"}, {"event": "u"}]


def test_file_handler(json_commands):
    handler = FileHandler(handler_config(json_commands))
    assert not handler.is_open
    handler.connect()
    assert handler.is_open
    handler.read()
    assert not handler.is_open
    commands = list(handler.query())
    assert [c["event"] for c in commands] == ["ms", "is", "r", "nb", "r"]


def test_file_handler_missing_file(tmp_path):
    handler = FileHandler(handler_config(tmp_path / "missing.json"))
    with pytest.raises(ConnectionError):
        handler.connect()


@pytest.mark.parametrize("reader", ["json", "plain"])
def test_engine_client(engine, json_commands, plain_commands, reader):
    url = json_commands if reader == "json" else plain_commands
    engine_client = EngineClient(engine, handler_config(url, reader))
    with engine_client.connect() as client_:
        client_.process()
    assert [reply["message_id"] for reply in engine_client.replies] == [0, 1, 2, 3, 4]
    assert not engine_client.rejected
    assert engine.snapshot()["innings"]["score"] == "6/0 in 0.2 overs"


def test_engine_client_rejections(engine, tmp_path, match_config):
    url = tmp_path / "commands.json"
    commands = innings_commands(match_config)
    commands.insert(2, {"event": "r", "body": {"runs": 5}})
    url.write_text(json.dumps(commands))
    engine_client = EngineClient(engine, handler_config(url))
    with engine_client.connect() as client_:
        client_.process()
    rejected = engine_client.rejected
    assert len(rejected) == 1
    assert rejected[0]["message_id"] == 2
    assert rejected[0]["reject_reason"] == RejectReason.BAD_COMMAND.value
    assert len(engine_client.replies) == 6


def test_invalid_event_command(engine, json_commands):
    engine_client = EngineClient(engine, handler_config(json_commands))
    with pytest.raises(ValueError):
        engine_client.on_event_command({"body": {}})
    with pytest.raises(ValueError):
        engine_client.on_event_command({"event": "zz"})
    assert engine.message_id == 0


def test_unexpected_message(engine, json_commands):
    engine_client = EngineClient(engine, handler_config(json_commands))
    with pytest.raises(ValueError):
        engine_client.on_message({"message_id": 0, "is_snapshot": False})
    # snapshots are not replies
    engine_client.on_message({"is_snapshot": True})
    assert engine_client.replies == []


def test_main(tmp_path, plain_commands, capsys):
    url = tmp_path / "scorebook.ini"
    config = ConfigParser()
    config.read_dict(
        {
            "STORE": {"loader": "memory"},
            "MATCH": {"total_overs": "2"},
            "FILE_HANDLER": {"url": str(plain_commands), "reader": "plain"},
        }
    )
    with open(url, "w") as fh:
        config.write(fh)
    assert client.main([str(url)]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["innings"]["score"] == "6/0 in 0.2 overs"
    assert output["result"] is None
