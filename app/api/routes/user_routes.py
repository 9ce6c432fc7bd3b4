"""User management API routes -- registration, listing, profile, password."""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_validator

from app.domain.errors import AppError, ErrorType
from app.domain.listing import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, DEFAULT_SORT
from app.domain.results import OperationResult
from app.infrastructure.audit import safe_log_event as audit_log
from app.infrastructure.auth.dependencies import get_current_user
from app.infrastructure.auth.password import MAX_PASSWORD_BYTES, password_fits

router = APIRouter(prefix="/api/users", tags=["users"])

_user_service = None


def init_user_routes(user_service):
    global _user_service
    _user_service = user_service


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

def _check_password_bytes(value: str) -> str:
    if not password_fits(value):
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
    return value


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=5, max_length=120)
    password: str = Field(..., min_length=6, max_length=32)
    password_confirm: str = Field(..., min_length=6, max_length=32)

    @field_validator("password", "password_confirm")
    @classmethod
    def _password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class UpdateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=5, max_length=120)


class ChangePasswordRequest(BaseModel):
    password_old: str = Field(..., min_length=1, max_length=32)
    password_new: str = Field(..., min_length=6, max_length=32)
    password_confirm: str = Field(..., min_length=6, max_length=32)

    @field_validator("password_new", "password_confirm")
    @classmethod
    def _password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _ensure_ok(result: OperationResult, failure_message: str) -> None:
    if result.is_not_found:
        raise AppError("Unknown user", ErrorType.NOT_FOUND)
    if not result:
        raise AppError(failure_message, ErrorType.UNPROCESSABLE_ENTITY)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("")
def api_list_users(
    page_number: int = Query(DEFAULT_PAGE_NUMBER),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    sort: str = Query(DEFAULT_SORT),
    search: str | None = Query(None),
    current_user: dict = Depends(get_current_user),
):
    """Paginated user list. ``sort`` is ``field:order``, ``search`` is ``field:text``."""
    page = _user_service.list_users(page_number, page_size, sort, search)
    return page.to_dict()


@router.post("")
def api_create_user(req: CreateUserRequest):
    """Register a new user account."""
    if _user_service.email_is_registered(req.email):
        raise AppError("Email is already registered", ErrorType.EMAIL_ALREADY_TAKEN)
    if req.password != req.password_confirm:
        raise AppError("Password confirmation mismatched", ErrorType.INVALID_PASSWORD)

    result = _user_service.create_user(req.name, req.email, req.password)
    if not result:
        raise AppError("Failed to create user", ErrorType.UNPROCESSABLE_ENTITY)

    audit_log("user_created", result.value["id"], {"email": result.value["email"]})
    return {"name": result.value["name"], "email": result.value["email"]}


@router.get("/{user_id}")
def api_get_user(user_id: str, current_user: dict = Depends(get_current_user)):
    user = _user_service.get_user(user_id)
    if user is None:
        raise AppError("Unknown user", ErrorType.NOT_FOUND)
    return user


@router.put("/{user_id}")
def api_update_user(
    user_id: str,
    req: UpdateUserRequest,
    current_user: dict = Depends(get_current_user),
):
    owner = _user_service.get_user_by_email(req.email)
    if owner is not None and owner["id"] != user_id:
        raise AppError("Email is already registered", ErrorType.EMAIL_ALREADY_TAKEN)

    result = _user_service.update_user(user_id, req.name, req.email)
    _ensure_ok(result, "Failed to update user")

    audit_log("user_updated", user_id, {"by": current_user.get("sub")})
    return {"id": user_id}


@router.delete("/{user_id}")
def api_delete_user(user_id: str, current_user: dict = Depends(get_current_user)):
    result = _user_service.delete_user(user_id)
    _ensure_ok(result, "Failed to delete user")

    audit_log("user_deleted", user_id, {"by": current_user.get("sub")})
    return {"id": user_id}


@router.patch("/{user_id}/change-password")
def api_change_password(
    user_id: str,
    req: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
):
    if req.password_new != req.password_confirm:
        raise AppError("Password confirmation mismatched", ErrorType.INVALID_PASSWORD)

    # UserNotFoundError propagates to the error responder as NOT_FOUND.
    old_matches = _user_service.check_password(user_id, req.password_old)
    if not old_matches:
        raise AppError("Wrong password", ErrorType.INVALID_PASSWORD)

    result = _user_service.change_password(user_id, req.password_new)
    _ensure_ok(result, "Failed to change password")

    audit_log("password_changed", user_id, {"by": current_user.get("sub")})
    return {"id": user_id}
