"""
FastAPI dependency injection functions.
Provides get_db, get_current_actor, and require_admin.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.core.exceptions import (
    ForbiddenException,
    InvalidTokenException,
    UnauthorizedException,
)
from assettrack.core.security import Actor, actor_from_claims, decode_access_token
from assettrack.db.session import get_db

# Re-export get_db so routes can import from one place
__all__ = ["get_db", "get_current_actor", "require_admin", "DBSession", "AdminActor"]

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> Actor:
    """
    Extract and validate the identity provider token from the Authorization
    header. Returns the Actor the token identifies.
    """
    if credentials is None:
        raise UnauthorizedException("Missing authentication token")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise InvalidTokenException("Invalid or expired access token")

    return actor_from_claims(payload)


async def require_admin(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Dependency that requires the current actor to hold the admin role."""
    if not actor.is_admin:
        raise ForbiddenException("Admin privileges required")
    return actor


# Convenience type aliases for route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
AdminActor = Annotated[Actor, Depends(require_admin)]
