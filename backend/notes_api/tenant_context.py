from __future__ import annotations

from dataclasses import dataclass

from notes_api.models.tenant import Plan, Tenant
from notes_api.models.user import Role, User


@dataclass(frozen=True)
class TenantContext:
    """
    Live identity of an authorized request.

    Built by the authorization pipeline from freshly loaded rows; every data
    operation scopes its queries with ``tenant_id``.
    """

    user: User
    tenant: Tenant

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def tenant_id(self) -> str:
        return self.tenant.id

    @property
    def role(self) -> Role:
        return self.user.role

    @property
    def plan(self) -> Plan:
        return self.tenant.subscription_plan

    @property
    def is_admin(self) -> bool:
        return self.user.role is Role.ADMIN
