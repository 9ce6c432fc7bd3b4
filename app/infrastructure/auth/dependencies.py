"""FastAPI authentication dependency (Bearer session token)."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.infrastructure.auth.jwt_handler import verify_token

_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
) -> dict:
    """Return the token payload (``sub`` = user id, ``email``) of the caller.

    Missing, invalid, expired or non-access tokens are rejected with 401.
    """
    if not credentials:
        raise _unauthorized("Authentication required.")

    payload = verify_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token.")
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type. Access token required.")
    return payload
