"""Use case: log a user in, with per-email lockout after repeated failures."""
import logging
from dataclasses import asdict, dataclass

from app.domain.errors import InvalidCredentialsError, TooManyAttemptsError
from app.infrastructure.auth.bruteforce import (
    MAX_ATTEMPTS,
    AttemptRecord,
    LoginAttemptStore,
)
from app.infrastructure.auth.jwt_handler import create_access_token
from app.infrastructure.auth.password import verify_password

logger = logging.getLogger("userhub.auth")

INVALID_CREDENTIALS_MESSAGE = "email atau password salah"
TOO_MANY_ATTEMPTS_MESSAGE = (
    "Terlalu banyak percobaan yang salah. silahkan dicoba beberapa saat lagi."
)


@dataclass(frozen=True)
class LoginResult:
    email: str
    name: str
    user_id: str
    token: str

    def to_dict(self) -> dict:
        return asdict(self)


class AuthenticationService:
    """Checks credentials and decides between success, failure and lockout."""

    def __init__(
        self,
        user_repo,
        attempts: LoginAttemptStore,
        verify=verify_password,
        issue_token=create_access_token,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self._users = user_repo
        self._attempts = attempts
        self._verify = verify
        self._issue_token = issue_token
        self._max_attempts = max_attempts

    def check_login_credentials(self, email: str, password: str) -> LoginResult | None:
        """Return a LoginResult when email and password match, else None.

        Every call is counted, including ones that succeed; a success then
        clears the record for that email.
        """
        user = self._users.find_by_email(email)
        self._attempts.record_attempt(email)

        if user is not None and self._verify(password, user.password_hash):
            self._attempts.clear(email)
            return LoginResult(
                email=user.email,
                name=user.name,
                user_id=user.id,
                token=self._issue_token(user.email, user.id),
            )
        return None

    def get_login_attempt_info(self, email: str) -> AttemptRecord | None:
        return self._attempts.get_info(email)

    def login(self, email: str, password: str) -> LoginResult:
        """Raises TooManyAttemptsError or InvalidCredentialsError on failure."""
        result = self.check_login_credentials(email, password)
        if result is not None:
            logger.info("Login succeeded for user %s", result.user_id)
            return result

        info = self.get_login_attempt_info(email)
        if info is not None and info.count >= self._max_attempts:
            logger.warning("Login locked for %s after %d attempts", email, info.count)
            raise TooManyAttemptsError(TOO_MANY_ATTEMPTS_MESSAGE, attempts=info.count)

        logger.info("Login failed for %s", email)
        raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
