from pydantic import BaseModel

from notes_api.schemas.auth import TenantOut


class UpgradeOut(BaseModel):
    message: str
    tenant: TenantOut
