from __future__ import annotations

import logging

from notes_api.core.errors import InvalidTransition, NotFound
from notes_api.models.tenant import Plan, Tenant
from notes_api.models.user import Role
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

logger = logging.getLogger(__name__)

# roles the authorization pipeline must require in front of upgrade()
UPGRADE_ROLES = frozenset({Role.ADMIN})


class SubscriptionService:
    """
    Plan state machine: FREE -> PRO, nothing else.

    ``upgrade`` assumes the caller went through the pipeline with
    ``required_roles=UPGRADE_ROLES`` and the slug as tenant parameter.
    """

    def __init__(self, store: NotesStore):
        self.store = store

    def transition(self, tenant: Tenant, target: Plan) -> Tenant:
        current = tenant.subscription_plan
        if not current.can_transition_to(target):
            raise InvalidTransition(f"Cannot move subscription from {current.value} to {target.value}")
        if current is target:
            return tenant

        updated = self.store.update_tenant_plan(tenant.id, target)
        if updated is None:
            raise NotFound("Tenant not found")
        logger.info("tenant %s plan %s -> %s", tenant.slug, current.value, target.value)
        return updated

    def upgrade(self, ctx: TenantContext, tenant_slug: str) -> Tenant:
        # pipeline already matched the slug; re-read so the idempotence check sees the stored plan
        tenant = self.store.find_tenant_by_slug(tenant_slug)
        if tenant is None or tenant.id != ctx.tenant_id:
            raise NotFound("Tenant not found")
        return self.transition(tenant, Plan.PRO)
