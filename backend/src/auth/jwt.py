"""JWT access tokens (HS256).

Claims:
- sub: User ID as UUID string (the caller of closure operations)
- email: User's email address, for display and audit logging
- iat / exp: Issued-at and expiration Unix timestamps

Organization ownership is not carried in the token; it is checked against
org.owner_id on every closure operation.

Configuration comes from the environment: JWT_SECRET (required) and
JWT_EXPIRY_MINUTES (default 60).
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from uuid import UUID
import jwt

ALGORITHM = "HS256"
DEFAULT_EXPIRY_MINUTES = 60


def _secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def _expiry() -> timedelta:
    raw = os.getenv("JWT_EXPIRY_MINUTES", str(DEFAULT_EXPIRY_MINUTES))
    minutes = int(raw) if raw.isdigit() else DEFAULT_EXPIRY_MINUTES
    return timedelta(minutes=minutes)


def create_access_token(user_id: UUID, email: str) -> str:
    """Sign an access token for user_id.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + _expiry()).timestamp()),
    }
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is malformed or signed with another key
        ValueError: If JWT_SECRET is not set
    """
    try:
        return jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {e}") from e
