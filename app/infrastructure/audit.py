"""Append-only audit trail for account and login events.

Each event is one JSON object per line in `logs/audit.log`. A module-level
lock keeps lines whole when threadpool workers write at the same time.
"""
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

_LOCK = threading.Lock()

ROOT = Path(__file__).resolve().parent.parent.parent
LOG_DIR = ROOT / "logs"
LOG_FILE = LOG_DIR / "audit.log"

logger = logging.getLogger("userhub.audit")


def log_event(action: str, user_id: str | None, payload: dict | None = None) -> None:
    entry = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "user_id": user_id,
        "payload": payload or {},
    }
    line = json.dumps(entry, ensure_ascii=False) + "\n"
    with _LOCK:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(line)


def safe_log_event(action: str, user_id: str | None, payload: dict | None = None) -> None:
    """Like log_event, but an unwritable audit file only produces a warning."""
    try:
        log_event(action, user_id, payload)
    except OSError as exc:
        logger.warning("Audit write failed for %s: %s", action, exc)
