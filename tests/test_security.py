"""
Tests for résumé download tokens.
"""

from datetime import timedelta

from jose import jwt

from jobmanager.core.config import settings
from jobmanager.core.security import create_download_token, decode_token, verify_download_token


def test_token_is_bound_to_application():
    token = create_download_token("42")

    assert verify_download_token(token, "42")
    assert verify_download_token(token, 42)
    assert not verify_download_token(token, "43")


def test_token_payload():
    payload = decode_token(create_download_token("7"))

    assert payload["sub"] == "7"
    assert payload["type"] == "cv_download"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_download_token("42", expires_delta=timedelta(seconds=-10))

    assert not verify_download_token(token, "42")


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "42", "type": "cv_download"}, "another-secret", algorithm=settings.ALGORITHM)

    assert not verify_download_token(token, "42")


def test_token_of_other_type_is_rejected():
    token = jwt.encode({"sub": "42", "type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    assert not verify_download_token(token, "42")


def test_malformed_token_is_rejected():
    assert not verify_download_token("definitely.not.a-token", "42")
