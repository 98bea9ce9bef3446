"""
Authentication service: password hashing, JWT access tokens, email validation.
"""

import os
import re
import logging
from datetime import timedelta
from typing import Optional, Dict

import bcrypt
import jwt

from backend.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "changeme")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRATION_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain text password against a bcrypt hash.

    Returns:
        True if the password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode (must include user_id)
        expires_delta: Optional lifetime; defaults to ACCESS_TOKEN_EXPIRATION_DAYS

    Returns:
        Encoded JWT string
    """
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRATION_DAYS))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[Dict]:
    """
    Decode and validate a JWT access token.

    Returns:
        Token payload, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        return None
    except jwt.InvalidTokenError:
        return None


def create_token_for_user(user: Dict) -> str:
    """Issue an access token carrying the user's id."""
    return create_access_token({"user_id": user["id"]})


def validate_email(email: str) -> bool:
    """Check that an email address is syntactically valid."""
    if not email:
        return False
    return bool(_EMAIL_RE.match(email))


def normalize_email(email: str) -> str:
    """
    Normalize an email address to trimmed lowercase.

    Raises:
        ValueError: If the email is empty or invalid
    """
    normalized = (email or "").strip().lower()
    if not validate_email(normalized):
        raise ValueError("Invalid email address")
    return normalized
