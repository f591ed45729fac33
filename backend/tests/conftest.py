from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notes_api.store.memory import InMemoryNotesStore

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnop"
PASSWORD = "password"


def _import_all_models():
    # registers the tables on Base.metadata before create_all()
    import notes_api.models.tenant  # noqa: F401
    import notes_api.models.user  # noqa: F401
    import notes_api.models.note  # noqa: F401


# -----------------------------
# in-memory store (unit tests)
# -----------------------------

class MutableNotesStore(InMemoryNotesStore):
    """Lets tests change users behind an already issued token."""

    def remove_user(self, user_id: str) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def set_user_role(self, user_id, role) -> None:
        with self._lock:
            self._users[user_id].role = role


@pytest.fixture
def credentials():
    from notes_api.auth.jwt import CredentialService

    return CredentialService(TEST_SECRET, ttl=timedelta(hours=24))


@pytest.fixture
def store():
    from notes_api.core.security import hash_password
    from notes_api.models.user import Role

    s = MutableNotesStore()
    pw = hash_password(PASSWORD)
    for slug, name in (("acme", "Acme Corporation"), ("globex", "Globex Corporation")):
        t = s.add_tenant(slug=slug, name=name, tenant_id=f"t-{slug}")
        s.add_user(f"admin@{slug}.test", pw, Role.ADMIN, t, user_id=f"u-{slug}-admin")
        s.add_user(f"user@{slug}.test", pw, Role.MEMBER, t, user_id=f"u-{slug}-member")
    return s


@pytest.fixture
def token_for(store, credentials):
    def _token(email: str) -> str:
        u = store.find_user_by_email(email)
        return credentials.issue(u.id, u.email, u.role, u.tenant_id, u.tenant.slug)

    return _token


@pytest.fixture
def bearer(token_for):
    def _bearer(email: str) -> str:
        return f"Bearer {token_for(email)}"

    return _bearer


# -----------------------------
# SQL + HTTP (API tests)
# -----------------------------

@pytest.fixture
def engine():
    from notes_api.db import Base

    _import_all_models()
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def seeded(session_factory):
    """Seeds acme + globex; returns {slug: tenant_id}."""
    from notes_api.seed import seed

    with session_factory() as db:
        tenants = seed(db, password=PASSWORD)
        return {slug: t.id for slug, t in tenants.items()}


@pytest.fixture
def client(session_factory, seeded, credentials):
    from notes_api.core.tenant import get_credential_service
    from notes_api.db import get_db
    from notes_api.main import app

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_credential_service] = lambda: credentials
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, email: str, password: str = PASSWORD) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth_header(client):
    """Headers for any seeded user: auth_header("admin@acme.test")."""
    cache: dict[str, dict] = {}

    def _header(email: str) -> dict:
        if email not in cache:
            cache[email] = login(client, email)
        return cache[email]

    return _header
