"""
Request authorization pipeline.

One guard in front of every tenant-scoped operation. Checks run strictly
in order and the first failure ends the request:

    1. bearer token present            -> MissingCredential   (401)
    2. token signature / expiry        -> InvalidCredential   (401)
    3. user still exists (live reload) -> UserNotFound        (401)
    4. path tenant == caller tenant    -> TenantMismatch      (403)
    5. caller role in required roles   -> InsufficientRole    (403)
    6. note quota (create only)        -> QuotaExceeded       (403)

The pipeline only gates entry. The wrapped operation still scopes its own
queries by ``ctx.tenant_id``.

Quota consistency: step 6 reads the count and the insert happens later in
the service, so two concurrent creates on a FREE tenant at 2 notes can both
pass (best effort). ``NoteService`` in strict mode rechecks under a
per-tenant lock.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from notes_api.auth.identity import IdentityResolver
from notes_api.auth.jwt import CredentialService
from notes_api.auth.policy import authorize_note_creation, authorize_role, authorize_tenant_access
from notes_api.core.errors import MissingCredential, NotesError
from notes_api.core.security import extract_bearer
from notes_api.models.user import Role
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

logger = logging.getLogger(__name__)


class AuthStage(str, Enum):
    START = "start"
    CREDENTIAL_EXTRACTED = "credential_extracted"
    CREDENTIAL_VERIFIED = "credential_verified"
    IDENTITY_RESOLVED = "identity_resolved"
    TENANT_AUTHORIZED = "tenant_authorized"
    ROLE_AUTHORIZED = "role_authorized"
    QUOTA_CHECKED = "quota_checked"
    AUTHORIZED = "authorized"


class AuthorizationPipeline:
    def __init__(self, credentials: CredentialService, store: NotesStore):
        self.credentials = credentials
        self.store = store
        self.identity = IdentityResolver(store)

    def authorize(
        self,
        authorization: str | None,
        *,
        tenant: str | None = None,
        required_roles: Iterable[Role] | None = None,
        creates_note: bool = False,
    ) -> TenantContext:
        """
        Run the checks for one request and return the live tenant context.

        ``tenant`` is the slug (or id) named by the route, if any.
        ``required_roles`` empty/None means any authenticated role.
        """
        stage = AuthStage.START
        try:
            token = extract_bearer(authorization)
            if token is None:
                raise MissingCredential(stage=stage)
            stage = AuthStage.CREDENTIAL_EXTRACTED

            claims = self.credentials.verify(token)
            stage = AuthStage.CREDENTIAL_VERIFIED

            identity = self.identity.resolve(claims)
            user, current_tenant = identity.user, identity.tenant
            stage = AuthStage.IDENTITY_RESOLVED

            if tenant is not None:
                authorize_tenant_access(current_tenant, tenant).enforce(stage)
            stage = AuthStage.TENANT_AUTHORIZED

            if required_roles:
                authorize_role(user.role, required_roles).enforce(stage)
            stage = AuthStage.ROLE_AUTHORIZED

            if creates_note:
                # plan may have changed since the identity was loaded
                fresh = self.store.find_tenant_by_id(current_tenant.id) or current_tenant
                count = self.store.count_notes_by_tenant(fresh.id)
                authorize_note_creation(fresh.subscription_plan, count).enforce(stage)
                current_tenant = fresh
            stage = AuthStage.QUOTA_CHECKED

        except NotesError as e:
            if e.stage is None:
                e.stage = stage
            logger.info("request rejected code=%s stage=%s", e.code.value, e.stage.value)
            raise

        logger.debug(
            "request %s user=%s tenant=%s", AuthStage.AUTHORIZED.value, user.id, current_tenant.slug
        )
        return TenantContext(user=user, tenant=current_tenant)
