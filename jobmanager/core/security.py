"""
Signed résumé download tokens.

A token is a short-lived JWT bound to one application id, issued to whoever
can present the candidate email for that application.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from jobmanager.core.config import settings

DOWNLOAD_TOKEN_TYPE = "cv_download"


def create_download_token(application_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a download token for an application's résumé.

    Args:
        application_id: Application the token grants access to
        expires_delta: Optional lifetime (default: DOWNLOAD_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT as a string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.DOWNLOAD_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(application_id),
        "type": DOWNLOAD_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def verify_download_token(token: str, application_id: str) -> bool:
    """Return True if token is a valid, unexpired download token for application_id"""
    try:
        payload = decode_token(token)
    except JWTError:
        return False

    return payload.get("type") == DOWNLOAD_TOKEN_TYPE and payload.get("sub") == str(application_id)
