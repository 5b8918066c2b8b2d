import abc

from scorebook.error import EngineError, RejectReason
from scorebook.util import LOGGER


class Context(abc.ABC):
    def __init__(self):
        self._event_handlers = {}
        self._child_context = None

    @abc.abstractmethod
    def snapshot(self) -> dict:
        pass

    def add_handler(self, event_type: "EventType", func: callable):
        self._event_handlers[event_type] = func

    def handle_event(self, event_type: "EventType", payload: dict) -> dict:
        handler = self._event_handlers.get(event_type)
        if handler:
            return handler(payload)
        if not self._child_context:
            msg = f"no context available to handle event {event_type.name}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        return self._child_context.handle_event(event_type, payload)
