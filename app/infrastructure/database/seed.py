"""Seed sample user accounts into the credential store."""
import logging

from app.domain.errors import DuplicateEmailError
from app.domain.user import User

logger = logging.getLogger("userhub.seed")

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    {"name": "Johni", "email": "johni@example.com"},
    {"name": "Hana", "email": "hana@example.com"},
    {"name": "Dadang", "email": "dadang@example.com"},
    {"name": "Acep", "email": "acep@test.com"},
    {"name": "Bob", "email": "bob@test.com"},
    {"name": "Charlie", "email": "charlie@example.com"},
    {"name": "Eveline", "email": "eveline@test.com"},
    {"name": "Jack", "email": "jack@example.com"},
]


def seed_users(user_repo, hash_fn, users: list | None = None) -> int:
    """Create every listed user whose email is not registered yet.

    Each item needs ``name`` and ``email``; ``password`` falls back to
    SAMPLE_PASSWORD. Returns the number of users created.
    """
    users = SAMPLE_USERS if users is None else users
    created = 0
    for item in users:
        if user_repo.find_by_email(item["email"]) is not None:
            continue
        user = User(
            name=item["name"],
            email=item["email"],
            password_hash=hash_fn(item.get("password", SAMPLE_PASSWORD)),
        )
        try:
            user_repo.create(user)
        except DuplicateEmailError:
            continue
        created += 1
    if created:
        logger.info("Seeded %d sample users.", created)
    return created
