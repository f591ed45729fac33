from __future__ import annotations

from passlib.hash import pbkdf2_sha256

# verified against when the email is unknown, so both login failures cost one hash check
_DUMMY_HASH = pbkdf2_sha256.hash("not-a-real-password")


def hash_password(plain: str) -> str:
    return pbkdf2_sha256.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        pbkdf2_sha256.verify(plain, _DUMMY_HASH)
        return False
    try:
        return pbkdf2_sha256.verify(plain, hashed)
    except ValueError:
        # stored value is not a pbkdf2_sha256 hash
        return False


def extract_bearer(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
