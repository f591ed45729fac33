from __future__ import annotations

import logging
from dataclasses import dataclass

from notes_api.auth.jwt import CredentialService
from notes_api.core.errors import InvalidCredentials, ValidationError
from notes_api.core.security import verify_password
from notes_api.models.user import User
from notes_api.store.base import NotesStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


def login(store: NotesStore, credentials: CredentialService, email: str | None, password: str | None) -> LoginResult:
    """Check email + password once and issue a bearer token."""
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = store.find_user_by_email(email.strip().lower())
    # unknown email and wrong password take the same path and the same time
    if not verify_password(password, user.password_hash if user else None) or user is None:
        raise InvalidCredentials()

    token = credentials.issue(
        user_id=user.id,
        email=user.email,
        role=user.role,
        tenant_id=user.tenant_id,
        tenant_slug=user.tenant.slug,
    )
    logger.info("login ok user=%s tenant=%s", user.id, user.tenant.slug)
    return LoginResult(token=token, user=user)
