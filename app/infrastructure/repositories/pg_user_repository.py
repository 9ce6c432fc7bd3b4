"""PostgreSQL-backed user repository."""
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.domain.errors import DuplicateEmailError, PersistenceError
from app.domain.listing import SearchSpec, SortSpec
from app.domain.user import User, normalize_email
from app.infrastructure.database.models import UserModel

_UPDATABLE_FIELDS = ("name", "email", "password_hash")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PgUserRepository:
    """User persistence via SQLAlchemy (PostgreSQL in production)."""

    def __init__(self, session_factory):
        self._sf = session_factory

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, user: User) -> User:
        data = user.to_dict()
        created_at = data.get("created_at")
        try:
            created_at = datetime.fromisoformat(created_at)
        except (ValueError, TypeError):
            created_at = datetime.now(timezone.utc)

        with self._sf() as session:
            session.add(UserModel(
                id=data["id"],
                name=data["name"],
                email=data["email"],
                password_hash=data["password_hash"],
                created_at=created_at,
            ))
            self._commit(session, data["email"])
        return user

    def update_fields(self, user_id: str, **fields) -> bool:
        """Update the given columns. Returns False if no row matched."""
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise PersistenceError(f"Cannot update fields: {sorted(unknown)}")
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"])

        with self._sf() as session:
            row = session.get(UserModel, user_id)
            if row is None:
                return False
            for name, value in fields.items():
                setattr(row, name, value)
            self._commit(session, fields.get("email"))
            return True

    def delete_by_id(self, user_id: str) -> bool:
        with self._sf() as session:
            row = session.get(UserModel, user_id)
            if row is None:
                return False
            session.delete(row)
            self._commit(session)
            return True

    @staticmethod
    def _commit(session, email: str | None = None) -> None:
        try:
            session.commit()
        except IntegrityError as exc:
            raise DuplicateEmailError(f"Email already registered: {email}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._sf() as session:
            row = session.get(UserModel, user_id)
            return self._to_domain(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        target = normalize_email(email)
        with self._sf() as session:
            row = session.query(UserModel).filter(UserModel.email == target).first()
            return self._to_domain(row) if row else None

    def count_matching(self, search: SearchSpec | None) -> int:
        with self._sf() as session:
            return self._filtered(session, search).count()

    def find_matching(
        self,
        search: SearchSpec | None,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list:
        column = getattr(UserModel, sort.field.value)
        ordering = column.desc() if sort.order.descending else column.asc()
        with self._sf() as session:
            rows = (
                self._filtered(session, search)
                .order_by(ordering, UserModel.id)
                .offset(skip)
                .limit(limit)
                .all()
            )
            return [self._to_domain(r) for r in rows]

    @staticmethod
    def _filtered(session, search: SearchSpec | None):
        query = session.query(UserModel)
        if search is not None:
            column = getattr(UserModel, search.field.value)
            query = query.filter(column.ilike(f"%{_escape_like(search.term)}%", escape="\\"))
        return query

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_domain(row: UserModel) -> User:
        return User(
            user_id=row.id,
            name=row.name,
            email=row.email,
            password_hash=row.password_hash,
            created_at=row.created_at.isoformat() if row.created_at else None,
        )
