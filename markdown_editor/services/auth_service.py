"""Caller identity extraction and the authentication guard.

Sessions are owned by an external identity provider which hands the
client a signed JWT. This module only verifies that token and turns its
claims into a CurrentUser; it never stores users or passwords.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from ..config import settings
from ..exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches require_user as "no identity"
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Authenticated caller identity."""

    id: str
    email: Optional[str] = None


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token in the identity provider's format.

    Used by tooling and tests; production tokens come from the provider.

    Args:
        data: Dictionary of claims to encode in the token ("sub" is the user id)
        expires_delta: Optional custom expiration time delta

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.jwt_expiration_minutes
        )

    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Optional[CurrentUser]:
    """
    Decode and validate a JWT access token.

    Args:
        token: The JWT token string to decode

    Returns:
        CurrentUser for a valid token with a subject, or None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return CurrentUser(id=str(user_id), email=payload.get("email"))


def require_user(identity: Optional[CurrentUser]) -> CurrentUser:
    """
    Authentication guard: return the caller or raise UnauthorizedError.

    Pure and synchronous; runs before any database access.
    """
    if identity is None:
        raise UnauthorizedError("You must be signed in to perform this action.")
    return identity


async def get_request_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    """FastAPI dependency: the identity attached to the request, if any."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


async def get_current_user(
    identity: Optional[CurrentUser] = Depends(get_request_identity),
) -> CurrentUser:
    """FastAPI dependency: the authenticated caller, or 401."""
    return require_user(identity)
