"""Application error kinds and the exceptions that carry them."""
from enum import Enum


class ErrorType(Enum):
    """Error kind -> (HTTP status, short description)."""

    INVALID_CREDENTIALS = (401, "Invalid credentials")
    TOO_MANY_ATTEMPTS = (429, "Too many failed login attempts")
    INVALID_QUERY = (400, "Invalid query parameter")
    INVALID_PASSWORD = (403, "Invalid password")
    NOT_FOUND = (404, "Resource not found")
    EMAIL_ALREADY_TAKEN = (409, "Email is already registered")
    UNPROCESSABLE_ENTITY = (422, "Unprocessable entity")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]


class AppError(Exception):
    """Base exception rendered by the HTTP error responder."""

    error_type = ErrorType.UNPROCESSABLE_ENTITY

    def __init__(self, message: str, error_type: ErrorType | None = None):
        super().__init__(message)
        self.message = message
        if error_type is not None:
            self.error_type = error_type


class InvalidCredentialsError(AppError):
    """Wrong email or password. Never says which one."""

    error_type = ErrorType.INVALID_CREDENTIALS


class TooManyAttemptsError(AppError):
    """Raised when an email has reached the failed-login limit."""

    error_type = ErrorType.TOO_MANY_ATTEMPTS

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class InvalidQueryError(AppError):
    """Malformed paging, sort or search input."""

    error_type = ErrorType.INVALID_QUERY


class UserNotFoundError(AppError):
    error_type = ErrorType.NOT_FOUND


# ---------------------------------------------------------------------------
# Storage errors (raised by repositories, folded into results by services)
# ---------------------------------------------------------------------------

class PersistenceError(Exception):
    """A write to the credential store failed."""
    pass


class DuplicateEmailError(PersistenceError):
    """Email uniqueness constraint violated."""
    pass
