import pytest
from pydantic import ValidationError

from notes_api.core.settings import Settings


def test_lab_generates_secret_when_empty(monkeypatch):
    monkeypatch.delenv("AUTH_JWT_SECRET", raising=False)
    s = Settings(_env_file=None, ENV="lab", AUTH_JWT_SECRET="")
    assert len(s.AUTH_JWT_SECRET) >= 32


def test_prod_requires_secret():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ENV="prod", AUTH_JWT_SECRET="")


def test_prod_rejects_short_secret():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ENV="prod", AUTH_JWT_SECRET="short")


def test_defaults():
    s = Settings(_env_file=None, AUTH_JWT_SECRET="x" * 40)
    assert s.AUTH_JWT_EXPIRE_MINUTES == 1440
    assert s.NOTE_QUOTA_MODE == "best_effort"
    assert s.AUTH_JWT_SECRET == "x" * 40


def test_quota_mode_is_closed():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, NOTE_QUOTA_MODE="exact")
