import enum


class RejectReason(enum.Enum):
    BAD_COMMAND = "bc"
    INCONSISTENT_STATE = "is"
    ILLEGAL_OPERATION = "io"
    STORE_FAILURE = "sf"


class AbstractScorebookError(Exception):
    def __init__(self, msg: str, reason: RejectReason):
        super().__init__(msg)
        self.msg = msg
        self.reason = reason

    def compile(self):
        message = {
            "reject_reason": self.reason.value,
            "message": self.msg,
        }
        return message


class EngineError(AbstractScorebookError):
    def __init__(self, msg: str, reason: RejectReason):
        super().__init__(msg, reason)


class StoreError(AbstractScorebookError):
    def __init__(self, msg: str, reason: RejectReason = RejectReason.STORE_FAILURE):
        super().__init__(msg, reason)
