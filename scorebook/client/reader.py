import json
from io import IOBase
from typing import MutableSequence


def json_reader(file_handler: IOBase, command_buffer: MutableSequence[dict]):
    commands = json.loads(file_handler.read())
    for command in commands:
        command_buffer.append(command)


def plain_reader(file_handler: IOBase, command_buffer: MutableSequence[dict]):
    """one JSON command per line, blank lines skipped"""
    for line in file_handler:
        line = line.strip()
        if line:
            command_buffer.append(json.loads(line))
