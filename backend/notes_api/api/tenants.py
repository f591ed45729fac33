from fastapi import APIRouter, Depends

from notes_api.core.tenant import get_store, require
from notes_api.schemas.auth import TenantOut
from notes_api.schemas.tenant import UpgradeOut
from notes_api.services.subscription import UPGRADE_ROLES, SubscriptionService
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


@router.post("/{slug}/upgrade", response_model=UpgradeOut)
def upgrade_tenant(
    slug: str,
    ctx: TenantContext = Depends(require(roles=UPGRADE_ROLES, tenant_param="slug")),
    store: NotesStore = Depends(get_store),
):
    tenant = SubscriptionService(store).upgrade(ctx, slug)
    return UpgradeOut(message="Subscription upgraded successfully", tenant=TenantOut.model_validate(tenant))
