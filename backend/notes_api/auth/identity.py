from __future__ import annotations

from dataclasses import dataclass

from notes_api.auth.jwt import CredentialClaims
from notes_api.core.errors import UserNotFound
from notes_api.models.tenant import Tenant
from notes_api.models.user import User
from notes_api.store.base import NotesStore


@dataclass(frozen=True)
class ResolvedIdentity:
    user: User
    tenant: Tenant


class IdentityResolver:
    """
    Reloads the caller from the store.

    Only ``claims.user_id`` is used. Role, tenant and plan come from the
    rows as they are now, not from the token. Store failures
    (UpstreamUnavailable) propagate untouched.
    """

    def __init__(self, store: NotesStore):
        self.store = store

    def resolve(self, claims: CredentialClaims) -> ResolvedIdentity:
        user = self.store.find_user_by_id(claims.user_id)
        if user is None or user.tenant is None:
            raise UserNotFound()
        return ResolvedIdentity(user=user, tenant=user.tenant)
