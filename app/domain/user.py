"""User entity -- account identity and hashed credentials."""
from datetime import datetime, timezone
from uuid import uuid4


class User:
    """Registered user. The password is only ever held as a hash."""

    def __init__(
        self,
        name: str,
        email: str,
        password_hash: str,
        user_id: str | None = None,
        created_at: str | None = None,
    ):
        self._id = user_id or str(uuid4())
        self._name = name.strip()
        self._email = normalize_email(email)
        self._password_hash = password_hash
        self._created_at = created_at or datetime.now(timezone.utc).isoformat()

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def created_at(self) -> str:
        return self._created_at

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "email": self._email,
            "password_hash": self._password_hash,
            "created_at": self._created_at,
        }

    def to_public_dict(self) -> dict:
        """Safe representation without credentials."""
        return {
            "id": self._id,
            "name": self._name,
            "email": self._email,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=data["id"],
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            created_at=data.get("created_at"),
        )


def normalize_email(email: str) -> str:
    return email.strip().lower()
