"""
Tests for session tokens and password hashing.
"""
from autotrack.core import auth


def test_password_round_trip():
    hashed = auth.hash_password("secret123")
    assert auth.verify_password("secret123", hashed)
    assert not auth.verify_password("wrong", hashed)
    assert not auth.verify_password("secret123", "not-a-bcrypt-hash")


def test_session_round_trip():
    token = auth.create_session(1, "emp@example.com", "employee", department="Engineering")

    session = auth.verify_session(token)

    assert session["user_id"] == 1
    assert session["department"] == "Engineering"


def test_tampered_token_is_rejected():
    token = auth.create_session(1, "emp@example.com", "employee")
    session_json, signature = token.rsplit(".", 1)
    forged = session_json.replace('"employee"', '"admin"') + "." + signature

    assert auth.verify_session(forged) is None


def test_logged_out_token_cannot_be_replayed():
    token = auth.create_session(2, "hod@example.com", "hod", department="Engineering")
    assert auth.verify_session(token) is not None

    auth.delete_session(token)

    assert auth.verify_session(token) is None
    # Not even after the cache is cold again
    auth._sessions.pop(token, None)
    assert auth.verify_session(token) is None
