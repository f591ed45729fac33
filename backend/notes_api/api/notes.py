from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from notes_api.core.errors import ValidationError
from notes_api.core.settings import get_settings
from notes_api.core.tenant import get_store, require, require_auth
from notes_api.schemas.note import NoteCreate, NoteOut, NoteUpdate
from notes_api.services.notes import NoteService
from notes_api.store.base import NotesStore
from notes_api.tenant_context import TenantContext

router = APIRouter(prefix="/api/notes", tags=["notes"])


def get_note_service(store: NotesStore = Depends(get_store)) -> NoteService:
    return NoteService(store, quota_mode=get_settings().NOTE_QUOTA_MODE)


async def json_body(request: Request) -> Any:
    # declared after the auth dependency, so the body is only read once the caller is authorized
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON") from None


def parse_body(model: type[BaseModel], body: Any):
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except PydanticValidationError:
        raise ValidationError("Title and content must be strings") from None


@router.get("", response_model=list[NoteOut])
def list_notes(ctx: TenantContext = Depends(require_auth), svc: NoteService = Depends(get_note_service)):
    return svc.list_notes(ctx)


@router.post("", response_model=NoteOut, status_code=201)
def create_note(
    ctx: TenantContext = Depends(require(creates_note=True)),
    body: Any = Depends(json_body),
    svc: NoteService = Depends(get_note_service),
):
    payload = parse_body(NoteCreate, body)
    return svc.create_note(ctx, payload.title, payload.content)


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: str, ctx: TenantContext = Depends(require_auth), svc: NoteService = Depends(get_note_service)):
    return svc.get_note(ctx, note_id)


@router.put("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: str,
    ctx: TenantContext = Depends(require_auth),
    body: Any = Depends(json_body),
    svc: NoteService = Depends(get_note_service),
):
    payload = parse_body(NoteUpdate, body)
    return svc.update_note(ctx, note_id, title=payload.title, content=payload.content)


@router.delete("/{note_id}", status_code=204)
def delete_note(note_id: str, ctx: TenantContext = Depends(require_auth), svc: NoteService = Depends(get_note_service)):
    svc.delete_note(ctx, note_id)
    return Response(status_code=204)
