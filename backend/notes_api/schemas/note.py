from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    title: str | None = None
    content: str | None = None


class NoteUpdate(BaseModel):
    title: str | None = Field(default=None, description="New title (omit to keep)")
    content: str | None = Field(default=None, description="New content (omit to keep)")


class NoteAuthor(BaseModel):
    id: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class NoteOut(BaseModel):
    id: str
    title: str
    content: str
    tenant_id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    user: NoteAuthor | None = None

    model_config = ConfigDict(from_attributes=True)
