"""Tagged outcome of a user-management write."""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class OperationResult:
    """Result of a create/update/delete/change-password call.

    Truthy only for ``Outcome.OK`` so a failed write still reads as falsy
    to callers that only test the result.
    """

    outcome: Outcome
    value: Any = None

    @classmethod
    def ok(cls, value: Any = True) -> "OperationResult":
        return cls(Outcome.OK, value)

    @classmethod
    def not_found(cls) -> "OperationResult":
        return cls(Outcome.NOT_FOUND)

    @classmethod
    def write_failed(cls) -> "OperationResult":
        return cls(Outcome.WRITE_FAILED)

    @property
    def is_ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def is_not_found(self) -> bool:
        return self.outcome is Outcome.NOT_FOUND

    def __bool__(self) -> bool:
        return self.is_ok
