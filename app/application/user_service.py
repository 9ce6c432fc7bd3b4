"""User management use cases: listing, lookup and account writes.

Writes never raise for a missing user or a failed store write. They return
an OperationResult tagged NOT_FOUND or WRITE_FAILED instead.
"""
import logging

from app.application.user_listing import list_users
from app.domain.errors import PersistenceError, UserNotFoundError
from app.domain.listing import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, DEFAULT_SORT, PagedResult
from app.domain.results import OperationResult
from app.domain.user import User
from app.infrastructure.auth.password import hash_password, verify_password

logger = logging.getLogger("userhub.users")


class UserService:
    def __init__(self, user_repo, hash_fn=hash_password, verify_fn=verify_password):
        self._users = user_repo
        self._hash = hash_fn
        self._verify = verify_fn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_users(
        self,
        page_number: int = DEFAULT_PAGE_NUMBER,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort: str | None = DEFAULT_SORT,
        search: str | None = None,
    ) -> PagedResult:
        page = list_users(self._users, page_number, page_size, sort, search)
        page.data = [u.to_public_dict() for u in page.data]
        return page

    def get_user(self, user_id: str) -> dict | None:
        user = self._users.find_by_id(user_id)
        if user is None:
            return None
        return user.to_public_dict()

    def get_user_by_email(self, email: str) -> dict | None:
        user = self._users.find_by_email(email)
        return user.to_public_dict() if user else None

    def email_is_registered(self, email: str) -> bool:
        return self._users.find_by_email(email) is not None

    def check_password(self, user_id: str, password: str) -> bool:
        """Compare ``password`` with the stored hash.

        Unlike the write operations, a missing user raises UserNotFoundError.
        """
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError("Unknown user")
        return self._verify(password, user.password_hash)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create_user(self, name: str, email: str, password: str) -> OperationResult:
        try:
            user = User(name=name, email=email, password_hash=self._hash(password))
            self._users.create(user)
        except (ValueError, PersistenceError) as exc:
            logger.warning("Create user failed for %s: %s", email, exc)
            return OperationResult.write_failed()
        return OperationResult.ok(user.to_public_dict())

    def update_user(self, user_id: str, name: str, email: str) -> OperationResult:
        if self._users.find_by_id(user_id) is None:
            return OperationResult.not_found()
        return self._write("update", user_id, self._users.update_fields, user_id, name=name, email=email)

    def delete_user(self, user_id: str) -> OperationResult:
        if self._users.find_by_id(user_id) is None:
            return OperationResult.not_found()
        return self._write("delete", user_id, self._users.delete_by_id, user_id)

    def change_password(self, user_id: str, password: str) -> OperationResult:
        # Existence is checked before paying for the hash.
        if self._users.find_by_id(user_id) is None:
            return OperationResult.not_found()
        try:
            password_hash = self._hash(password)
        except ValueError as exc:
            logger.warning("Change password failed for user %s: %s", user_id, exc)
            return OperationResult.write_failed()
        return self._write(
            "change password", user_id, self._users.update_fields, user_id,
            password_hash=password_hash,
        )

    @staticmethod
    def _write(action: str, user_id: str, operation, *args, **kwargs) -> OperationResult:
        try:
            matched = operation(*args, **kwargs)
        except PersistenceError as exc:
            logger.warning("%s failed for user %s: %s", action.capitalize(), user_id, exc)
            return OperationResult.write_failed()
        if not matched:
            logger.warning("%s matched no rows for user %s", action.capitalize(), user_id)
            return OperationResult.write_failed()
        return OperationResult.ok()
