"""User persistence (JSON file + in-memory cache)."""
import json
import os
from typing import Dict, Optional

from app.domain.errors import DuplicateEmailError, PersistenceError
from app.domain.listing import SearchSpec, SortSpec
from app.domain.user import User, normalize_email

_UPDATABLE_FIELDS = ("name", "email", "password_hash")


class UserRepository:
    """JSON-backed user storage. Development fallback when no database is set."""

    def __init__(self, data_path: str = "data/users.json"):
        self._data_path = data_path
        self._users: Dict[str, User] = {}
        self._load()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, user: User) -> User:
        """Insert a new user. Raises DuplicateEmailError on email clash."""
        if self.find_by_email(user.email) is not None:
            raise DuplicateEmailError(f"Email already registered: {user.email}")
        users = dict(self._users)
        users[user.id] = user
        self._commit(users)
        return user

    def update_fields(self, user_id: str, **fields) -> bool:
        """Update the given fields. Returns False if no user matched."""
        user = self._users.get(user_id)
        if user is None:
            return False
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise PersistenceError(f"Cannot update fields: {sorted(unknown)}")
        if "email" in fields:
            owner = self.find_by_email(fields["email"])
            if owner is not None and owner.id != user_id:
                raise DuplicateEmailError(f"Email already registered: {fields['email']}")
        data = user.to_dict()
        data.update(fields)
        users = dict(self._users)
        users[user_id] = User.from_dict(data)
        self._commit(users)
        return True

    def delete_by_id(self, user_id: str) -> bool:
        if user_id not in self._users:
            return False
        users = dict(self._users)
        del users[user_id]
        self._commit(users)
        return True

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        """Lookup by email (case-insensitive)."""
        target = normalize_email(email)
        for user in self._users.values():
            if user.email == target:
                return user
        return None

    def count_matching(self, search: SearchSpec | None) -> int:
        return len(self._matching(search))

    def find_matching(
        self,
        search: SearchSpec | None,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list:
        users = sorted(
            self._matching(search),
            key=lambda u: getattr(u, sort.field.value),
            reverse=sort.order.descending,
        )
        return users[skip:skip + limit]

    def _matching(self, search: SearchSpec | None) -> list:
        if search is None:
            return list(self._users.values())
        return [
            u for u in self._users.values()
            if search.matches(getattr(u, search.field.value))
        ]

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _commit(self, users: Dict[str, User]) -> None:
        """Write ``users`` to disk, then make them the in-memory state.

        On PersistenceError the cache keeps its previous contents.
        """
        self._persist(users)
        self._users = users

    def _persist(self, users: Dict[str, User]) -> None:
        """Write all users to the JSON file."""
        data = {uid: user.to_dict() for uid, user in users.items()}
        directory = os.path.dirname(self._data_path)
        tmp_path = self._data_path + ".tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._data_path)
        except OSError as exc:
            raise PersistenceError(f"Could not write {self._data_path}: {exc}") from exc

    def _load(self) -> None:
        if not os.path.exists(self._data_path):
            return
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError):
            return
        for uid, udata in data.items():
            self._users[uid] = User.from_dict(udata)
