from typing import List, NamedTuple, Optional

from scorebook.event import EventType


class RecordedCommand(NamedTuple):
    event_type: EventType
    payload: dict


class CommandRegistrar:
    """History of the commands the engine has accepted, oldest first."""

    def __init__(self):
        self._commands: List[RecordedCommand] = []

    def __len__(self) -> int:
        return len(self._commands)

    def add(self, event_type: EventType, payload: dict):
        self._commands.append(RecordedCommand(event_type, dict(payload)))

    def peek(self) -> Optional[RecordedCommand]:
        if not self._commands:
            return None
        return self._commands[-1]

    def pop(self) -> Optional[RecordedCommand]:
        if not self._commands:
            return None
        return self._commands.pop()

    def of_type(self, event_type: EventType) -> List[RecordedCommand]:
        return [c for c in self._commands if c.event_type == event_type]
