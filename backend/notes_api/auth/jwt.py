from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from notes_api.core.errors import InvalidCredential
from notes_api.core.settings import Settings
from notes_api.models.user import Role

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "email", "role", "tenant_id", "tenant_slug", "exp", "iat"]


@dataclass(frozen=True)
class CredentialClaims:
    """
    Snapshot of who the caller was at issuance time.

    Only ``user_id`` is trusted downstream; role and tenant are reloaded
    from the store on every request.
    """

    user_id: str
    email: str
    role: Role
    tenant_id: str
    tenant_slug: str
    issued_at: datetime
    expires_at: datetime


class CredentialService:
    """Issues and verifies signed, time-bounded bearer tokens (HS256 JWT)."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24), algorithm: str = "HS256"):
        if not secret:
            raise ValueError("CredentialService requires a signing secret")
        if ttl < timedelta(0):
            raise ValueError("Token lifetime cannot be negative")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            secret=settings.AUTH_JWT_SECRET,
            ttl=timedelta(minutes=settings.AUTH_JWT_EXPIRE_MINUTES),
            algorithm=settings.AUTH_JWT_ALGORITHM,
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str, email: str, role: Role, tenant_id: str, tenant_slug: str) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "role": Role(role).value,
            "tenant_id": str(tenant_id),
            "tenant_slug": tenant_slug,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> CredentialClaims:
        # Expired, tampered and garbage tokens all end up as the same InvalidCredential.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
            return CredentialClaims(
                user_id=str(payload["sub"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
                tenant_id=str(payload["tenant_id"]),
                tenant_slug=str(payload["tenant_slug"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except jwt.PyJWTError as e:
            logger.debug("token rejected: %s", type(e).__name__)
            raise InvalidCredential() from None
        except (KeyError, ValueError, TypeError):
            logger.debug("token rejected: malformed claims")
            raise InvalidCredential() from None
