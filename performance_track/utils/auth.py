"""Password hashing and access token helpers."""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from performance_track.config import settings
from performance_track.models.user import CurrentUser, UserRole


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Example:
        >>> hash_password("mypassword123").startswith("$2b$")
        True
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain text password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(
    user_id: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token for a user.

    The token carries the user ID as ``sub`` and the role the user held at
    login, so routers can resolve the actor without a database round trip.

    Args:
        user_id: User ID to encode in token
        role: Role of the user
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)

    to_encode = {
        "sub": user_id,
        "role": UserRole(role).value,
        "exp": datetime.utcnow() + expires_delta,
    }

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> CurrentUser:
    """
    Verify and decode a JWT access token.

    Args:
        token: JWT token string to verify

    Returns:
        The authenticated caller

    Raises:
        JWTError: If token is invalid, expired or missing claims
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    user_id = payload.get("sub")
    role = payload.get("role")

    if user_id is None:
        raise JWTError("Token payload missing 'sub' claim")

    try:
        return CurrentUser(id=user_id, role=UserRole(role))
    except ValueError:
        raise JWTError("Token payload has an unknown role")
