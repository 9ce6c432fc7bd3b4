"""Unit tests for password hashing utilities."""
import pytest
from app.infrastructure.auth.password import hash_password, password_fits, verify_password


class TestHashPassword:
    def test_returns_bcrypt_hash(self):
        h = hash_password("secret")
        assert h.startswith("$2b$") or h.startswith("$2a$")

    def test_hash_is_not_plaintext(self):
        assert "secret" not in hash_password("secret")

    def test_different_calls_produce_different_hashes(self):
        """bcrypt uses different salts each time."""
        assert hash_password("secret") != hash_password("secret")

    def test_multibyte_password_at_limit_hashes(self):
        h = hash_password("日" * 24)
        assert verify_password("日" * 24, h) is True

    def test_over_72_bytes_rejected(self):
        with pytest.raises(ValueError):
            hash_password("日" * 25)


class TestVerifyPassword:
    def test_correct_password_returns_true(self):
        h = hash_password("mypassword")
        assert verify_password("mypassword", h) is True

    def test_wrong_password_returns_false(self):
        h = hash_password("mypassword")
        assert verify_password("wrongpassword", h) is False

    def test_empty_password_returns_false(self):
        h = hash_password("mypassword")
        assert verify_password("", h) is False

    def test_invalid_hash_returns_false(self):
        assert verify_password("pass", "not_a_hash") is False


@pytest.mark.parametrize("plain,fits", [
    ("x" * 72, True),
    ("x" * 73, False),
    ("日" * 24, True),
    ("日" * 25, False),
])
def test_password_fits_counts_utf8_bytes(plain, fits):
    assert password_fits(plain) is fits
