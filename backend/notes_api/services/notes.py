from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from notes_api.auth.policy import authorize_note_creation
from notes_api.core.errors import NotFound, ValidationError
from notes_api.models.note import Note
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200

QUOTA_BEST_EFFORT = "best_effort"
QUOTA_STRICT = "strict"


class TenantLocks:
    """One lock per tenant id, created on first use. Process-local."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, tenant_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(tenant_id, threading.Lock())
        with lock:
            yield


_tenant_locks = TenantLocks()


class NoteService:
    """
    Note CRUD for one authorized tenant context.

    Every store call is scoped by ``ctx.tenant_id``; a note of another tenant
    is reported exactly like a missing one.
    """

    def __init__(self, store: NotesStore, quota_mode: str = QUOTA_BEST_EFFORT, locks: TenantLocks | None = None):
        if quota_mode not in (QUOTA_BEST_EFFORT, QUOTA_STRICT):
            raise ValueError(f"Unknown quota mode: {quota_mode}")
        self.store = store
        self.quota_mode = quota_mode
        self.locks = locks or _tenant_locks

    def list_notes(self, ctx: TenantContext) -> list[Note]:
        return self.store.list_notes_by_tenant(ctx.tenant_id)

    def create_note(self, ctx: TenantContext, title: str | None, content: str | None) -> Note:
        # the quota was already checked by the pipeline; input is validated only after that
        if not (title and title.strip()) or not (content and content.strip()):
            raise ValidationError("Title and content are required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")

        if self.quota_mode == QUOTA_STRICT:
            with self.locks.hold(ctx.tenant_id):
                tenant = self.store.find_tenant_by_id(ctx.tenant_id) or ctx.tenant
                count = self.store.count_notes_by_tenant(ctx.tenant_id)
                authorize_note_creation(tenant.subscription_plan, count).enforce()
                note = self._insert(ctx, title, content)
        else:
            note = self._insert(ctx, title, content)

        logger.info("note created id=%s tenant=%s", note.id, ctx.tenant.slug)
        return note

    def _insert(self, ctx: TenantContext, title: str, content: str) -> Note:
        return self.store.create_note(tenant_id=ctx.tenant_id, user_id=ctx.user_id, title=title, content=content)

    def get_note(self, ctx: TenantContext, note_id: str) -> Note:
        note = self.store.find_note_by_id_and_tenant(note_id, ctx.tenant_id)
        if note is None:
            raise NotFound("Note not found")
        return note

    def update_note(
        self, ctx: TenantContext, note_id: str, title: str | None = None, content: str | None = None
    ) -> Note:
        if title is not None and not title.strip():
            title = None
        if content is not None and not content.strip():
            content = None
        if title is None and content is None:
            raise ValidationError("Title or content is required")
        if title is not None and len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")

        note = self.store.update_note(note_id, ctx.tenant_id, title=title, content=content)
        if note is None:
            raise NotFound("Note not found")
        return note

    def delete_note(self, ctx: TenantContext, note_id: str) -> None:
        if not self.store.delete_note(note_id, ctx.tenant_id):
            raise NotFound("Note not found")
        logger.info("note deleted id=%s tenant=%s", note_id, ctx.tenant.slug)
