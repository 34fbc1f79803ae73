# loanapi/results.py
import enum
from dataclasses import dataclass
from typing import Any


class Status(str, enum.Enum):
    SUCCESS = "Success"
    NOT_FOUND = "NotFound"
    BAD_REQUEST = "BadRequest"
    FORBIDDEN = "Forbidden"
    CONFLICT = "Conflict"
    UNAUTHORIZED = "Unauthorized"


HTTP_STATUS = {
    Status.SUCCESS: 200,
    Status.NOT_FOUND: 404,
    Status.BAD_REQUEST: 400,
    Status.FORBIDDEN: 403,
    Status.CONFLICT: 409,
    Status.UNAUTHORIZED: 401,
}


@dataclass
class ServiceResult:
    success: bool
    status: Status
    message: str
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ServiceResult":
        return cls(True, Status.SUCCESS, message, data)

    @classmethod
    def fail(cls, status: Status, message: str) -> "ServiceResult":
        return cls(False, status, message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.status]
