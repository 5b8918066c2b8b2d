from enum import Enum
from functools import wraps


class EventType(Enum):
    MATCH_STARTED = "ms"
    INNINGS_STARTED = "is"
    INNINGS_SELECTED = "sel"
    INNINGS_DELETED = "del"
    RUNS = "r"
    WIDE = "wd"
    NO_BALL = "nb"
    WICKET = "w"
    RUNS_WITH_WICKET = "rw"
    OVER_STARTED = "os"
    OVER_COMPLETED = "oc"
    UNDO = "u"


def record_command(event_type: EventType):
    """Register the payload of a handled command once the handler has accepted it."""

    def decorator(func: callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            obj = args[0]  # self
            resp = func(*args, **kwargs)
            obj.command_registrar.add(event_type, args[1])
            return resp

        return wrapper

    return decorator
