"""Entry point. Wires the credential store and services into the routes.

Persistence strategy:
  - If DATABASE_URL is set  -> SQL store (PostgreSQL in production).
  - Otherwise               -> JSON file fallback (development only).
"""
import logging
import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(BASE_DIR)
load_dotenv(os.path.join(PROJECT_DIR, ".env"))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_error_handlers
from app.api.routes.auth_routes import router as auth_router, init_auth_routes
from app.api.routes.user_routes import router as user_router, init_user_routes
from app.application.authentication import AuthenticationService
from app.application.user_service import UserService
from app.infrastructure.auth.bruteforce import (
    InMemoryLoginAttemptStore,
    LOCKOUT_WINDOW_SECONDS,
    MAX_ATTEMPTS,
)
from app.infrastructure.auth.password import hash_password

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("userhub.startup")

DATA_DIR = os.path.join(BASE_DIR, "data")
DATABASE_URL = os.environ.get("DATABASE_URL", "")
USERS_DATA_PATH = os.environ.get("USERS_DATA_PATH", os.path.join(DATA_DIR, "users.json"))

LOGIN_MAX_ATTEMPTS = int(os.environ.get("LOGIN_MAX_ATTEMPTS", str(MAX_ATTEMPTS)))
LOGIN_LOCKOUT_SECONDS = int(
    os.environ.get("LOGIN_LOCKOUT_MINUTES", str(LOCKOUT_WINDOW_SECONDS // 60))
) * 60

app = FastAPI(
    title="userhub",
    description="User accounts and login with brute-force lockout.",
    version="1.0.0",
)

# CORS configuration: read allowed origins from env (comma-separated).
_allowed = os.environ.get("ALLOWED_ORIGINS", "").strip()
if _allowed:
    allow_origins = [o.strip() for o in _allowed.split(",") if o.strip()]
else:
    allow_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ---------------------------------------------------------------------------
# Persistence wiring
# ---------------------------------------------------------------------------

if DATABASE_URL:
    from app.infrastructure.database.connection import (
        init_engine, create_tables, managed_session_factory,
    )
    from app.infrastructure.repositories.pg_user_repository import PgUserRepository

    init_engine()
    create_tables()
    user_repo = PgUserRepository(managed_session_factory)
    _persistence = "sql"
else:
    from app.infrastructure.repositories.user_repository import UserRepository

    user_repo = UserRepository(data_path=USERS_DATA_PATH)
    _persistence = "json"

logger.info("Credential store: %s", _persistence)

if os.environ.get("SEED_SAMPLE_USERS", "").lower() in ("1", "true", "yes"):
    from app.infrastructure.database.seed import seed_users

    seed_users(user_repo, hash_password)

# One attempt store per process; every login request shares it.
login_attempts = InMemoryLoginAttemptStore(window_seconds=LOGIN_LOCKOUT_SECONDS)

init_auth_routes(
    AuthenticationService(user_repo, login_attempts, max_attempts=LOGIN_MAX_ATTEMPTS)
)
init_user_routes(UserService(user_repo))

app.include_router(auth_router)
app.include_router(user_router)


@app.get("/health")
def health():
    result = {
        "status": "online",
        "system": "userhub v1.0.0",
        "persistence": _persistence,
    }
    if DATABASE_URL:
        from app.infrastructure.database.connection import check_health
        result["database"] = "connected" if check_health() else "disconnected"
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
