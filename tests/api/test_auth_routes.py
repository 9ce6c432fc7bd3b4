"""
Integration tests for the login route (/api/authentication/login).

Uses the shared TestClient from conftest.py (JSON repo, no real DB).
"""
import json

from app.application.authentication import (
    INVALID_CREDENTIALS_MESSAGE,
    TOO_MANY_ATTEMPTS_MESSAGE,
)
from app.infrastructure.auth import bruteforce
from app.infrastructure.auth.jwt_handler import verify_token

LOGIN_URL = "/api/authentication/login"


def _login(client, email, password):
    return client.post(LOGIN_URL, json={"email": email, "password": password})


def _audit_actions(log_dir):
    lines = (log_dir / "audit.log").read_text(encoding="utf-8").splitlines()
    return [json.loads(line)["action"] for line in lines]


class TestLoginSuccess:
    def test_returns_identity_and_token(self, client, registered_user):
        resp = _login(client, registered_user["email"], registered_user["password"])
        assert resp.status_code == 200
        data = resp.json()
        assert data["email"] == registered_user["email"]
        assert data["name"] == registered_user["name"]
        payload = verify_token(data["token"])
        assert payload["sub"] == data["user_id"]
        assert payload["type"] == "access"

    def test_email_is_case_insensitive(self, client, registered_user):
        resp = _login(client, registered_user["email"].upper(), registered_user["password"])
        assert resp.status_code == 200

    def test_writes_audit_entry(self, client, registered_user, tmp_audit_log):
        _login(client, registered_user["email"], registered_user["password"])
        assert _audit_actions(tmp_audit_log)[-1] == "login_succeeded"


class TestLoginFailure:
    def test_wrong_password(self, client, registered_user):
        resp = _login(client, registered_user["email"], "WrongPass")
        assert resp.status_code == 401
        assert resp.json() == {
            "statusCode": 401,
            "error": "INVALID_CREDENTIALS",
            "description": "Invalid credentials",
            "message": INVALID_CREDENTIALS_MESSAGE,
        }

    def test_unknown_email_same_response(self, client, registered_user):
        wrong_password = _login(client, registered_user["email"], "WrongPass").json()
        unknown_email = _login(client, "ghost@example.com", "WrongPass").json()
        assert unknown_email == wrong_password

    def test_missing_fields_rejected(self, client):
        resp = client.post(LOGIN_URL, json={"email": "a@example.com"})
        assert resp.status_code == 422

    def test_failure_is_audited(self, client, registered_user, tmp_audit_log):
        _login(client, registered_user["email"], "WrongPass")
        assert _audit_actions(tmp_audit_log)[-1] == "login_failed"


class TestLockout:
    def _exhaust(self, client, email, times=5):
        return [_login(client, email, "WrongPass").status_code for _ in range(times)]

    def test_fifth_failure_locks(self, client, registered_user):
        codes = self._exhaust(client, registered_user["email"])
        assert codes == [401, 401, 401, 401, 429]

    def test_locked_response_body(self, client, registered_user, tmp_audit_log):
        self._exhaust(client, registered_user["email"])
        resp = _login(client, registered_user["email"], "WrongPass")
        assert resp.status_code == 429
        body = resp.json()
        assert body["error"] == "TOO_MANY_ATTEMPTS"
        assert body["message"] == TOO_MANY_ATTEMPTS_MESSAGE
        assert _audit_actions(tmp_audit_log)[-1] == "login_locked"

    def test_correct_password_still_accepted(self, client, registered_user):
        self._exhaust(client, registered_user["email"], times=6)
        resp = _login(client, registered_user["email"], registered_user["password"])
        assert resp.status_code == 200
        assert _login(client, registered_user["email"], "WrongPass").status_code == 401

    def test_lock_expires_after_window(self, client, registered_user, clock):
        self._exhaust(client, registered_user["email"], times=6)
        clock.advance(bruteforce.LOCKOUT_WINDOW_SECONDS + 1)
        assert _login(client, registered_user["email"], "WrongPass").status_code == 401

    def test_other_emails_unaffected(self, client, registered_user):
        self._exhaust(client, "ghost@example.com", times=6)
        resp = _login(client, registered_user["email"], registered_user["password"])
        assert resp.status_code == 200
