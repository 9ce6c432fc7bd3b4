"""Password hashing -- bcrypt."""
import os

import bcrypt

BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_fits(plain: str) -> bool:
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt.

    Raises ValueError when the UTF-8 encoding exceeds MAX_PASSWORD_BYTES.
    """
    if not password_fits(plain):
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(
        plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
