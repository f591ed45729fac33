"""
FastAPI dependencies wiring the authorization pipeline into routes.

Usage:

    @router.post("/{slug}/upgrade")
    def upgrade(slug: str, ctx: TenantContext = Depends(require(roles={Role.ADMIN}, tenant_param="slug"))):
        ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Iterable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from notes_api.auth.jwt import CredentialService
from notes_api.auth.pipeline import AuthorizationPipeline
from notes_api.core.settings import get_settings
from notes_api.db import get_db
from notes_api.models.user import Role
from notes_api.store.base import NotesStore
from notes_api.store.sql import SqlNotesStore
from notes_api.tenant_context import TenantContext


@lru_cache
def get_credential_service() -> CredentialService:
    # built once per process from the startup settings; the secret never changes afterwards
    return CredentialService.from_settings(get_settings())


def get_store(db: Session = Depends(get_db)) -> NotesStore:
    return SqlNotesStore(db)


def get_pipeline(
    store: NotesStore = Depends(get_store),
    credentials: CredentialService = Depends(get_credential_service),
) -> AuthorizationPipeline:
    return AuthorizationPipeline(credentials, store)


def require(
    roles: Iterable[Role] | None = None,
    tenant_param: str | None = None,
    creates_note: bool = False,
) -> Callable[..., TenantContext]:
    """
    Build a dependency that runs the authorization pipeline and resolves to
    the caller's ``TenantContext``.

    Args:
        roles: roles allowed to call the route (None = any authenticated user)
        tenant_param: name of the path parameter holding the target tenant slug
        creates_note: run the note quota check
    """
    required = frozenset(roles or ())

    def dependency(request: Request, pipeline: AuthorizationPipeline = Depends(get_pipeline)) -> TenantContext:
        target = request.path_params.get(tenant_param) if tenant_param else None
        return pipeline.authorize(
            request.headers.get("Authorization"),
            tenant=target,
            required_roles=required,
            creates_note=creates_note,
        )

    return dependency


require_auth = require()
