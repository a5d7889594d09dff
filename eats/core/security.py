# eats/core/security.py
import secrets
from datetime import datetime, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from eats.core.config import settings


password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain password for storage.

    Args:
        password: Plain password

    Returns:
        bcrypt hash
    """
    return password_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a plain password against its stored hash.

    Args:
        password: Plain password
        hashed_password: Stored bcrypt hash

    Returns:
        True if the password matches
    """
    return password_context.verify(password, hashed_password)


def create_access_token(user_id: int) -> str:
    """
    Issue a signed token for a user id.

    Args:
        user_id: Numeric user identity

    Returns:
        Encoded JWT
    """
    payload: dict[str, Any] = {
        "id": user_id,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify a token and return its payload.

    Args:
        token: Encoded JWT

    Returns:
        Payload dict, or None if the token is invalid
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None


def generate_verification_code() -> str:
    """
    Generate an e-mail verification code.

    Returns:
        32-character hexadecimal code
    """
    return secrets.token_hex(16)
