"""FastAPI dependencies for authentication.

Closure endpoints only need to know who is calling; whether the caller owns
the organization is decided by the closure service against org.owner_id.

Usage:
    @router.get("/{org_id}/closure-preview")
    def preview(org_id: UUID, user: User = Depends(get_current_user)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from uuid import UUID
import jwt

from database import get_db
from models.user import User
from .jwt import decode_token


# HTTP Bearer token security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_id_from_token(token: str) -> UUID:
    """Validate a bearer token and return the user id in its 'sub' claim.

    Raises:
        HTTPException 401: Token expired, malformed or missing 'sub'
    """
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(str(e))

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Invalid token: missing user ID claim")

    try:
        return UUID(subject)
    except ValueError:
        raise _unauthorized(f"Invalid token claims: malformed user ID '{subject}'")


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Return the active user identified by the request's bearer token.

    Raises:
        HTTPException 401: Invalid token or unknown user
        HTTPException 403: User account is disabled
    """
    user_id = get_user_id_from_token(credentials.credentials)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("User not found")

    if user.status != "ACTIVE":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user
