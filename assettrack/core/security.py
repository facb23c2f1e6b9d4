"""
Bearer token verification.
Tokens are issued by the external identity provider; this module only
decodes them with python-jose and turns the claims into an Actor.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jose import JWTError, jwt

from assettrack.core.config import settings


@dataclass(frozen=True)
class Actor:
    """The identified admin performing a request."""

    subject: str
    username: str
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return settings.ADMIN_ROLE in self.roles


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an identity provider access token.
    Raises JWTError on failure.
    """
    options = {"verify_aud": settings.IDP_JWT_AUDIENCE is not None}
    payload = jwt.decode(
        token,
        settings.IDP_JWT_SECRET,
        algorithms=[settings.IDP_JWT_ALGORITHM],
        audience=settings.IDP_JWT_AUDIENCE,
        options=options,
    )
    if not payload.get("sub"):
        raise JWTError("Token has no subject")
    return payload


def actor_from_claims(payload: dict[str, Any]) -> Actor:
    subject = str(payload["sub"])
    username = payload.get(settings.IDP_USERNAME_CLAIM) or subject
    raw_roles = payload.get(settings.IDP_ROLES_CLAIM) or []
    if isinstance(raw_roles, str):
        raw_roles = raw_roles.split()
    return Actor(
        subject=subject,
        username=str(username),
        roles=frozenset(str(role) for role in raw_roles),
    )
