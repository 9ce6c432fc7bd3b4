"""Authentication API routes -- login."""
from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.domain.errors import TooManyAttemptsError, InvalidCredentialsError
from app.infrastructure.audit import safe_log_event as audit_log


router = APIRouter(prefix="/api/authentication", tags=["authentication"])

_auth_service = None


def init_auth_routes(auth_service):
    global _auth_service
    _auth_service = auth_service


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1, max_length=128)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/login")
def api_login(req: LoginRequest):
    """Authenticate by email and password. Returns a session token.

    Errors are rendered by the error responder: INVALID_CREDENTIALS for a
    wrong email or password, TOO_MANY_ATTEMPTS once the email is locked out.
    """
    try:
        result = _auth_service.login(req.email, req.password)
    except TooManyAttemptsError as exc:
        audit_log("login_locked", None, {"email": req.email, "attempts": exc.attempts})
        raise
    except InvalidCredentialsError:
        audit_log("login_failed", None, {"email": req.email})
        raise

    audit_log("login_succeeded", result.user_id, {"email": result.email})
    return result.to_dict()
