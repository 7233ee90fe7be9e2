"""Unit tests for password hashing."""

from pharmacy.core.security import hash_password, verify_password


def test_hash_is_not_plaintext():
    hashed = hash_password("password123")

    assert hashed != "password123"
    assert hashed.startswith("$pbkdf2-sha256$")


def test_verify_password():
    hashed = hash_password("password123")

    assert verify_password("password123", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")
