"""Database engine and session factory for the SQL credential store.

Call ``init_engine()`` once at startup, then pass ``managed_session_factory``
to repositories:

    with managed_session_factory() as session:
        ...
"""
import logging
import os
import re
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger("userhub.db")

_engine = None
_SessionLocal = None

# Matches a postgres(ql):// URL anywhere inside a string.
_PG_URL_RE = re.compile(r"(postgres(?:ql)?://\S+)")


def _resolve_database_url(env_var: str = "DATABASE_URL") -> str:
    """Read a database URL from environment and return a clean SQLAlchemy URL.

    Handles:
    - Leading/trailing whitespace or newlines from copy-paste.
    - Literal surrounding quotes pasted in dashboards.
    - Full ``psql`` command pasted instead of just the URL.
    - ``postgres://`` scheme that SQLAlchemy rejects (needs ``postgresql://``).
    """
    raw = os.environ.get(env_var, "").strip()

    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'"):
        raw = raw[1:-1].strip()

    match = _PG_URL_RE.search(raw)
    url = match.group(1) if match else raw
    url = url.rstrip("'\"").strip()

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    return url


def _build_engine(url: str):
    """Create a SQLAlchemy engine, logging only the host part of the URL."""
    masked = url.split("@")[-1].split("?")[0] if "@" in url else url.split("://")[0]
    logger.info("Initialising database engine -> %s", masked)
    if url.startswith("sqlite"):
        return create_engine(url, echo=False)
    return create_engine(
        url,
        pool_size=3,
        max_overflow=5,
        pool_timeout=15,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False,
    )


def init_engine(url: str | None = None) -> None:
    """Create the engine from ``url`` or the DATABASE_URL environment variable."""
    global _engine, _SessionLocal

    url = url or _resolve_database_url("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is empty -- cannot initialise the database.")

    _engine = _build_engine(url)
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def get_engine():
    """Return the current SQLAlchemy engine (may be None)."""
    return _engine


def get_session_factory():
    if _SessionLocal is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")
    return _SessionLocal


def create_tables() -> None:
    """Create all tables (idempotent)."""
    from app.infrastructure.database.models import Base

    if _engine is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")
    Base.metadata.create_all(bind=_engine)
    logger.info("Tables verified.")


def check_health() -> bool:
    """Lightweight connectivity probe."""
    if _engine is None:
        return False
    try:
        with _engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        return False


@contextmanager
def managed_session_factory():
    """Yield a session that is rolled back on error and always closed."""
    session = get_session_factory()()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
