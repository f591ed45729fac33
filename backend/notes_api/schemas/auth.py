from pydantic import BaseModel, ConfigDict

from notes_api.models.tenant import Plan
from notes_api.models.user import Role


class LoginIn(BaseModel):
    # optional at the schema level so missing fields surface as our 400, after parsing
    email: str | None = None
    password: str | None = None


class TenantOut(BaseModel):
    id: str
    name: str
    slug: str
    subscription_plan: Plan

    model_config = ConfigDict(from_attributes=True)


class UserOut(BaseModel):
    id: str
    email: str
    role: Role
    tenant: TenantOut

    model_config = ConfigDict(from_attributes=True)


class LoginOut(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut
