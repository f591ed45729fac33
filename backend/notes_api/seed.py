"""
Demo data: two FREE tenants with one admin, one member and one welcome note each.

    python -m notes_api.seed

Idempotent: existing rows (matched by slug / email / note id) are left alone.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from notes_api.core.security import hash_password
from notes_api.db import Base, SessionLocal, engine
from notes_api.models.note import Note
from notes_api.models.tenant import Plan, Tenant
from notes_api.models.user import Role, User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

TENANTS = [
    ("acme", "Acme Corporation"),
    ("globex", "Globex Corporation"),
]


def _get_or_create_tenant(db: Session, slug: str, name: str) -> Tenant:
    t = db.scalar(select(Tenant).where(Tenant.slug == slug))
    if t is None:
        t = Tenant(slug=slug, name=name, subscription_plan=Plan.FREE)
        db.add(t)
        db.flush()
    return t


def _get_or_create_user(db: Session, email: str, role: Role, tenant: Tenant, password_hash: str) -> User:
    u = db.scalar(select(User).where(User.email == email))
    if u is None:
        u = User(email=email, role=role, tenant_id=tenant.id, password_hash=password_hash)
        db.add(u)
        db.flush()
    return u


def seed(db: Session, password: str = DEMO_PASSWORD) -> dict[str, Tenant]:
    password_hash = hash_password(password)
    tenants: dict[str, Tenant] = {}

    for i, (slug, name) in enumerate(TENANTS, start=1):
        tenant = _get_or_create_tenant(db, slug, name)
        admin = _get_or_create_user(db, f"admin@{slug}.test", Role.ADMIN, tenant, password_hash)
        _get_or_create_user(db, f"user@{slug}.test", Role.MEMBER, tenant, password_hash)

        note_id = f"sample-note-{i}"
        if db.get(Note, note_id) is None:
            db.add(
                Note(
                    id=note_id,
                    title=f"Welcome to {name.split()[0]} Notes",
                    content=f"This is a sample note for {name}. Each tenant has isolated data.",
                    user_id=admin.id,
                    tenant_id=tenant.id,
                )
            )
        tenants[slug] = tenant

    db.commit()
    return tenants


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed(db)
    for slug, name in TENANTS:
        logger.info("%s (FREE): admin@%s.test (ADMIN), user@%s.test (MEMBER) / password: %s",
                    name, slug, slug, DEMO_PASSWORD)


if __name__ == "__main__":
    main()
