"""Storage interface the authorization layer and services depend on."""

from __future__ import annotations

from typing import Protocol

from notes_api.models.note import Note
from notes_api.models.tenant import Plan, Tenant
from notes_api.models.user import User


class NotesStore(Protocol):
    """
    Query/mutation operations over tenants, users and notes.

    Implementations raise ``UpstreamUnavailable`` when the backing store
    fails; "not there" is always ``None`` / ``False``, never an exception.
    """

    def find_user_by_email(self, email: str) -> User | None: ...

    def find_user_by_id(self, user_id: str) -> User | None:
        """User with its tenant loaded, read fresh from the store."""
        ...

    def find_tenant_by_id(self, tenant_id: str) -> Tenant | None: ...

    def find_tenant_by_slug(self, slug: str) -> Tenant | None: ...

    def count_notes_by_tenant(self, tenant_id: str) -> int: ...

    def create_note(self, *, tenant_id: str, user_id: str, title: str, content: str) -> Note: ...

    def find_note_by_id_and_tenant(self, note_id: str, tenant_id: str) -> Note | None: ...

    def update_note(
        self, note_id: str, tenant_id: str, *, title: str | None = None, content: str | None = None
    ) -> Note | None: ...

    def delete_note(self, note_id: str, tenant_id: str) -> bool: ...

    def list_notes_by_tenant(self, tenant_id: str) -> list[Note]:
        """Newest first."""
        ...

    def update_tenant_plan(self, tenant_id: str, plan: Plan) -> Tenant | None: ...
