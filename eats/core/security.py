"""
Password hashing and JWT helpers.

Tokens carry ``{"id": <user id>}`` plus ``exp``/``iat`` and are signed with
the configured secret. Decoding never raises: an invalid or expired token
yields ``None`` and the request is treated as anonymous.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from eats.core.config import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def create_access_token(data: dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed JWT.

    Args:
        data: Claims to embed (typically ``{"id": user.id}``)
        expires_minutes: Override for the configured token lifetime

    Returns:
        Encoded token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    lifetime = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes

    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + timedelta(minutes=lifetime)})
    return jwt.encode(to_encode, settings.token_secret, algorithm=settings.token_algorithm)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """Decode a JWT, returning its payload or ``None`` when invalid."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.token_secret, algorithms=[settings.token_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None
