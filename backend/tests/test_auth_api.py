def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_health_is_also_served_under_api_prefix(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == client.get("/health").json()


def test_login_malformed_body_uses_error_envelope(client):
    r = client.post("/api/auth/login", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid input", "code": "VALIDATION_ERROR"}


def test_login_returns_token_and_user_view(client):
    r = client.post("/api/auth/login", json={"email": "admin@acme.test", "password": "password"})
    assert r.status_code == 200

    data = r.json()
    assert data["token"]
    assert data["expires_in"] == 24 * 3600
    assert data["user"]["email"] == "admin@acme.test"
    assert data["user"]["role"] == "ADMIN"
    assert data["user"]["tenant"]["slug"] == "acme"
    assert data["user"]["tenant"]["subscription_plan"] == "FREE"
    assert "password_hash" not in data["user"]


def test_login_failures_are_generic(client):
    wrong = client.post("/api/auth/login", json={"email": "admin@acme.test", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@acme.test", "password": "password"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials", "code": "INVALID_CREDENTIALS"}


def test_login_requires_fields(client):
    r = client.post("/api/auth/login", json={"email": "admin@acme.test"})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_me_reflects_the_live_user(client, auth_header):
    r = client.get("/api/auth/me", headers=auth_header("user@globex.test"))
    assert r.status_code == 200
    assert r.json()["role"] == "MEMBER"
    assert r.json()["tenant"]["slug"] == "globex"


def test_missing_token(client):
    r = client.get("/api/notes")
    assert r.status_code == 401
    assert r.json() == {"error": "No token provided", "code": "UNAUTHORIZED"}
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token(client):
    r = client.get("/api/notes", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token", "code": "UNAUTHORIZED"}


def test_token_signed_elsewhere_is_rejected(client):
    from datetime import timedelta

    from notes_api.auth.jwt import CredentialService
    from notes_api.models.user import Role

    forged = CredentialService("some-other-secret-aaaaaaaaaaaaaaaaaaaa", ttl=timedelta(hours=1)).issue(
        "whoever", "admin@acme.test", Role.ADMIN, "t", "acme"
    )
    r = client.get("/api/notes", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401


def test_deleted_user_gets_same_401_as_bad_token(client, auth_header, session_factory):
    from sqlalchemy import delete, select

    from notes_api.models.user import User

    headers = auth_header("user@globex.test")
    with session_factory() as db:
        uid = db.scalar(select(User.id).where(User.email == "user@globex.test"))
        db.execute(delete(User).where(User.id == uid))
        db.commit()

    gone = client.get("/api/notes", headers=headers)
    bad = client.get("/api/notes", headers={"Authorization": "Bearer x.y.z"})
    assert gone.status_code == bad.status_code == 401
    assert gone.json() == bad.json()
