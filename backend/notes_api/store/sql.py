from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from notes_api.core.errors import UpstreamUnavailable
from notes_api.models.note import Note
from notes_api.models.tenant import Plan, Tenant, utcnow
from notes_api.models.user import User

logger = logging.getLogger(__name__)


class SqlNotesStore:
    """SQLAlchemy implementation of ``NotesStore`` bound to one request session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _db_errors(self, op: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError:
            logger.exception("DB error during %s", op)
            try:
                self.db.rollback()
            except SQLAlchemyError:
                logger.warning("rollback failed after %s", op)
            raise UpstreamUnavailable() from None

    # -----------------------------
    # users / tenants
    # -----------------------------

    def find_user_by_email(self, email: str) -> User | None:
        with self._db_errors("find_user_by_email"):
            q = select(User).options(joinedload(User.tenant)).where(User.email == email)
            return self.db.scalar(q)

    def find_user_by_id(self, user_id: str) -> User | None:
        with self._db_errors("find_user_by_id"):
            q = (
                select(User)
                .options(joinedload(User.tenant))
                .where(User.id == user_id)
                .execution_options(populate_existing=True)
            )
            return self.db.scalar(q)

    def find_tenant_by_id(self, tenant_id: str) -> Tenant | None:
        with self._db_errors("find_tenant_by_id"):
            q = select(Tenant).where(Tenant.id == tenant_id).execution_options(populate_existing=True)
            return self.db.scalar(q)

    def find_tenant_by_slug(self, slug: str) -> Tenant | None:
        with self._db_errors("find_tenant_by_slug"):
            q = select(Tenant).where(Tenant.slug == slug).execution_options(populate_existing=True)
            return self.db.scalar(q)

    def update_tenant_plan(self, tenant_id: str, plan: Plan) -> Tenant | None:
        with self._db_errors("update_tenant_plan"):
            tenant = self.db.scalar(select(Tenant).where(Tenant.id == tenant_id))
            if tenant is None:
                return None
            tenant.subscription_plan = plan
            self.db.commit()
            self.db.refresh(tenant)
            return tenant

    # -----------------------------
    # notes
    # -----------------------------

    def count_notes_by_tenant(self, tenant_id: str) -> int:
        with self._db_errors("count_notes_by_tenant"):
            q = select(func.count()).select_from(Note).where(Note.tenant_id == tenant_id)
            return int(self.db.scalar(q) or 0)

    def create_note(self, *, tenant_id: str, user_id: str, title: str, content: str) -> Note:
        with self._db_errors("create_note"):
            n = Note(tenant_id=tenant_id, user_id=user_id, title=title, content=content)
            self.db.add(n)
            self.db.commit()
            self.db.refresh(n)
            return n

    def find_note_by_id_and_tenant(self, note_id: str, tenant_id: str) -> Note | None:
        with self._db_errors("find_note_by_id_and_tenant"):
            q = (
                select(Note)
                .options(joinedload(Note.user))
                .where(Note.id == note_id)
                .where(Note.tenant_id == tenant_id)
            )
            return self.db.scalar(q)

    def update_note(
        self, note_id: str, tenant_id: str, *, title: str | None = None, content: str | None = None
    ) -> Note | None:
        with self._db_errors("update_note"):
            n = self.db.scalar(select(Note).where(Note.id == note_id).where(Note.tenant_id == tenant_id))
            if n is None:
                return None
            if title is not None:
                n.title = title
            if content is not None:
                n.content = content
            n.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(n)
            return n

    def delete_note(self, note_id: str, tenant_id: str) -> bool:
        with self._db_errors("delete_note"):
            res = self.db.execute(delete(Note).where(Note.id == note_id).where(Note.tenant_id == tenant_id))
            self.db.commit()
            return bool(res.rowcount)

    def list_notes_by_tenant(self, tenant_id: str) -> list[Note]:
        with self._db_errors("list_notes_by_tenant"):
            q = (
                select(Note)
                .options(joinedload(Note.user))
                .where(Note.tenant_id == tenant_id)
                .order_by(Note.created_at.desc(), Note.id.desc())
            )
            return list(self.db.scalars(q))
