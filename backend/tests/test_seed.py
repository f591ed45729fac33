from sqlalchemy import func, select

from notes_api.core.security import verify_password
from notes_api.models.note import Note
from notes_api.models.tenant import Plan, Tenant
from notes_api.models.user import Role, User
from notes_api.seed import seed


def test_seed_is_idempotent(session_factory, seeded):
    with session_factory() as db:
        seed(db)
        assert db.scalar(select(func.count()).select_from(Tenant)) == 2
        assert db.scalar(select(func.count()).select_from(User)) == 4
        assert db.scalar(select(func.count()).select_from(Note)) == 2


def test_seed_accounts(session_factory, seeded):
    with session_factory() as db:
        admin = db.scalar(select(User).where(User.email == "admin@acme.test"))
        member = db.scalar(select(User).where(User.email == "user@globex.test"))

        assert admin.role is Role.ADMIN
        assert member.role is Role.MEMBER
        assert admin.tenant.subscription_plan is Plan.FREE
        assert verify_password("password", admin.password_hash)
        assert not verify_password("Password", admin.password_hash)
