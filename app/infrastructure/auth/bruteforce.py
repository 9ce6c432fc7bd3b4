"""In-memory login attempt tracking for brute-force protection.

Process-local and lock-free: concurrent checks for the same email may
undercount. That is acceptable for a best-effort throttle. Swap the store
for a shared one by implementing ``LoginAttemptStore``.
"""
import time
from dataclasses import dataclass, replace
from typing import Callable, Protocol

# Configurable limits
MAX_ATTEMPTS = 5
LOCKOUT_WINDOW_SECONDS = 30 * 60


@dataclass
class AttemptRecord:
    count: int = 0
    last_attempt_at: float = 0.0


class LoginAttemptStore(Protocol):
    def record_attempt(self, email: str) -> int: ...

    def get_info(self, email: str) -> AttemptRecord | None: ...

    def clear(self, email: str) -> None: ...


class InMemoryLoginAttemptStore:
    """Per-email attempt counter with a rolling reset window."""

    def __init__(
        self,
        window_seconds: float = LOCKOUT_WINDOW_SECONDS,
        clock: Callable[[], float] | None = None,
    ):
        self._window = window_seconds
        self._clock = clock or time.time
        self._records: dict[str, AttemptRecord] = {}

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def record_attempt(self, email: str) -> int:
        """Count one login check and return the updated count.

        The window is measured from the previous attempt, so a first
        attempt (last_attempt_at == 0) never resets.
        """
        now = self._clock()
        key = self._key(email)
        record = self._records.get(key) or AttemptRecord()
        if record.last_attempt_at > 0 and now - record.last_attempt_at > self._window:
            record.count = 0
        record.last_attempt_at = now
        record.count += 1
        self._records[key] = record
        return record.count

    def get_info(self, email: str) -> AttemptRecord | None:
        record = self._records.get(self._key(email))
        return replace(record) if record else None

    def clear(self, email: str) -> None:
        self._records.pop(self._key(email), None)

    def __len__(self) -> int:
        return len(self._records)
