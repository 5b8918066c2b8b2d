import json
import logging
import os
import sys
from collections import deque
from contextlib import contextmanager
from typing import List

from scorebook.client.reader import json_reader, plain_reader
from scorebook.engine import ScoringEngine
from scorebook.event import EventType
from scorebook.util import LOGGER, load_config


class FileHandler:
    """Reads scoring commands from a file, either a JSON list or JSON lines."""

    def __init__(self, config: dict):
        self.config = config["FILE_HANDLER"]
        self.url: str = os.path.expanduser(self.config["url"])
        self.reader_func = {"json": json_reader, "plain": plain_reader}[
            self.config.get("reader", "json")
        ]
        self.file_handler = None
        self.command_buffer: deque = deque()

    @property
    def is_open(self):
        return self.file_handler is not None and not self.file_handler.closed

    def connect(self):
        try:
            self.file_handler = open(self.url, "r")
        except IOError:
            raise ConnectionError(f"error connecting to file source {self.url}")

    def close(self):
        if self.is_open:
            self.file_handler.close()

    def read(self):
        self.reader_func(self.file_handler, self.command_buffer)
        self.close()

    def query(self):
        while self.command_buffer:
            yield self.command_buffer.popleft()


class EngineClient:
    """
    Feeds commands from a handler to the engine in order, numbering them so the
    engine can check the sequence, and pairs each reply with the command it answers.
    """

    def __init__(self, engine: ScoringEngine, config: dict):
        self.engine = engine
        self.config = config
        self.engine_sequence = engine.message_id
        self._pending_commands: deque = deque()
        self.replies: List[dict] = []
        self._handler = FileHandler(config)

    def process(self):
        while self._handler.is_open:
            self._handler.read()
            for command in self._handler.query():
                self.on_event_command(command)

    def on_event_command(self, command: dict):
        e_type = command.get("event")
        if not e_type:
            raise ValueError(f"no event type passed in event command {command}")
        try:
            EventType(e_type)
        except ValueError:
            raise ValueError(f"event command payload has an invalid type {e_type}")
        command = dict(command, command_id=self.engine_sequence)
        self.engine_sequence += 1
        self._pending_commands.append(command)
        self.engine.on_command(command)

    def on_message(self, message: dict):
        if message.get("is_snapshot"):
            return
        message_id = message.get("message_id")
        if message_id is None:
            raise ValueError(f"received message from engine with no id {message}")
        if not self._pending_commands:
            raise ValueError("received message from engine without pending commands")
        oldest_command = self._pending_commands.popleft()
        command_id = oldest_command["command_id"]
        if message_id != command_id:
            raise ValueError(
                f"message_id does not match command_id of oldest pending command "
                f"{message_id} != {command_id}"
            )
        if "reject_reason" in message:
            LOGGER.warning(f"command {command_id} rejected: {message['message']}")
        self.replies.append(message)

    @property
    def rejected(self) -> List[dict]:
        return [reply for reply in self.replies if "reject_reason" in reply]

    @contextmanager
    def connect(self):
        """connect to the command file and register for engine replies"""
        self.engine.register_client(self)
        self._handler.connect()
        yield self
        self._handler.close()


def main(argv: List[str] = None):
    logging.basicConfig(level=logging.INFO)
    argv = sys.argv[1:] if argv is None else argv
    config = load_config(argv[0] if argv else None)
    engine = ScoringEngine.from_config(config)
    client = EngineClient(engine, config)
    with client.connect() as client_:
        client_.process()
    print(json.dumps(engine.snapshot(), indent=4))
    return 1 if client.rejected else 0


if __name__ == "__main__":
    sys.exit(main())
