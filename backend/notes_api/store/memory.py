"""In-memory implementation of the store interface."""

from __future__ import annotations

import threading

from notes_api.models.note import Note
from notes_api.models.tenant import Plan, Tenant, new_id, utcnow
from notes_api.models.user import Role, User


class InMemoryNotesStore:
    """
    Dict-backed ``NotesStore``. Safe to share between threads.

    Rows are transient ORM instances, so callers see the same types as
    with the SQL store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tenants: dict[str, Tenant] = {}
        self._users: dict[str, User] = {}
        self._notes: dict[str, Note] = {}

    # -----------------------------
    # provisioning (no API counterpart)
    # -----------------------------

    def add_tenant(self, slug: str, name: str, plan: Plan = Plan.FREE, tenant_id: str | None = None) -> Tenant:
        with self._lock:
            if any(t.slug == slug for t in self._tenants.values()):
                raise ValueError(f"Tenant slug already exists: {slug}")
            t = Tenant(id=tenant_id or new_id(), slug=slug, name=name, subscription_plan=plan, created_at=utcnow())
            self._tenants[t.id] = t
            return t

    def add_user(self, email: str, password_hash: str, role: Role, tenant: Tenant, user_id: str | None = None) -> User:
        with self._lock:
            if self.find_user_by_email(email.lower()) is not None:
                raise ValueError(f"Email already registered: {email}")
            u = User(
                id=user_id or new_id(),
                email=email.lower(),
                password_hash=password_hash,
                role=role,
                tenant_id=tenant.id,
                created_at=utcnow(),
            )
            u.tenant = tenant
            self._users[u.id] = u
            return u

    # -----------------------------
    # NotesStore
    # -----------------------------

    def find_user_by_email(self, email: str) -> User | None:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def find_user_by_id(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def find_tenant_by_id(self, tenant_id: str) -> Tenant | None:
        with self._lock:
            return self._tenants.get(tenant_id)

    def find_tenant_by_slug(self, slug: str) -> Tenant | None:
        with self._lock:
            return next((t for t in self._tenants.values() if t.slug == slug), None)

    def update_tenant_plan(self, tenant_id: str, plan: Plan) -> Tenant | None:
        with self._lock:
            t = self._tenants.get(tenant_id)
            if t is None:
                return None
            t.subscription_plan = plan
            return t

    def count_notes_by_tenant(self, tenant_id: str) -> int:
        with self._lock:
            return sum(1 for n in self._notes.values() if n.tenant_id == tenant_id)

    def create_note(self, *, tenant_id: str, user_id: str, title: str, content: str) -> Note:
        with self._lock:
            now = utcnow()
            n = Note(
                id=new_id(),
                tenant_id=tenant_id,
                user_id=user_id,
                title=title,
                content=content,
                created_at=now,
                updated_at=now,
            )
            n.user = self._users.get(user_id)
            self._notes[n.id] = n
            return n

    def find_note_by_id_and_tenant(self, note_id: str, tenant_id: str) -> Note | None:
        with self._lock:
            n = self._notes.get(note_id)
            if n is None or n.tenant_id != tenant_id:
                return None
            return n

    def update_note(
        self, note_id: str, tenant_id: str, *, title: str | None = None, content: str | None = None
    ) -> Note | None:
        with self._lock:
            n = self.find_note_by_id_and_tenant(note_id, tenant_id)
            if n is None:
                return None
            if title is not None:
                n.title = title
            if content is not None:
                n.content = content
            n.updated_at = utcnow()
            return n

    def delete_note(self, note_id: str, tenant_id: str) -> bool:
        with self._lock:
            if self.find_note_by_id_and_tenant(note_id, tenant_id) is None:
                return False
            del self._notes[note_id]
            return True

    def list_notes_by_tenant(self, tenant_id: str) -> list[Note]:
        with self._lock:
            notes = [n for n in self._notes.values() if n.tenant_id == tenant_id]
        # insertion order breaks created_at ties
        return list(reversed(sorted(notes, key=lambda n: n.created_at)))
