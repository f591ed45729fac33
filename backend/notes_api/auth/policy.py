"""
Access policy: pure decisions, no I/O.

Each function answers one question about an already-resolved identity and
returns a ``Decision``. Callers that want the exception instead call
``Decision.enforce()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from notes_api.core.errors import REJECTIONS, RejectionReason
from notes_api.models.tenant import Plan
from notes_api.models.user import Role

FREE_PLAN_NOTE_LIMIT = 3


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: RejectionReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: RejectionReason) -> "Decision":
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self, stage: Any = None) -> None:
        if not self.allowed:
            raise REJECTIONS[self.reason](stage=stage)


def authorize_tenant_access(caller_tenant: Any, target: str | None) -> Decision:
    """
    Allow only when ``target`` names the caller's own tenant, by id or slug.

    ``caller_tenant`` needs ``id`` and ``slug`` attributes.
    """
    if target is not None and target in (caller_tenant.id, caller_tenant.slug):
        return Decision.allow()
    return Decision.deny(RejectionReason.TENANT_MISMATCH)


def authorize_role(caller_role: Role, required_roles: Iterable[Role]) -> Decision:
    if caller_role in set(required_roles):
        return Decision.allow()
    return Decision.deny(RejectionReason.INSUFFICIENT_ROLE)


def authorize_note_creation(tenant_plan: Plan, current_note_count: int) -> Decision:
    if current_note_count < 0:
        raise ValueError("note count cannot be negative")
    if tenant_plan is Plan.PRO:
        return Decision.allow()
    if current_note_count < FREE_PLAN_NOTE_LIMIT:
        return Decision.allow()
    return Decision.deny(RejectionReason.QUOTA_EXCEEDED)
