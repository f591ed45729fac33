from fastapi import APIRouter, Depends

from notes_api.auth.jwt import CredentialService
from notes_api.core.tenant import get_credential_service, get_store, require_auth
from notes_api.schemas.auth import LoginIn, LoginOut, UserOut
from notes_api.services.accounts import login as login_user
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    store: NotesStore = Depends(get_store),
    credentials: CredentialService = Depends(get_credential_service),
):
    result = login_user(store, credentials, payload.email, payload.password)
    return LoginOut(
        token=result.token,
        expires_in=int(credentials.ttl.total_seconds()),
        user=UserOut.model_validate(result.user),
    )


@router.get("/me", response_model=UserOut)
def me(ctx: TenantContext = Depends(require_auth)):
    # live rows, not the token claims
    return UserOut.model_validate(ctx.user)
