from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.document import DocumentStatus


class IngestRequest(BaseModel):
    owner_id: str = Field(..., min_length=1, description="Identifier of the owning user.")
    source_path: str = Field(..., min_length=1, description="Absolute path of the file to ingest.")


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    workspace_id: UUID | None = None
    title: str
    file_name: str | None = None
    file_type: str | None = None
    mime_type: str | None = None
    file_path: str | None = None
    file_size_bytes: int | None = None
    content: str | None = None
    summary: str | None = None
    status: DocumentStatus
    processing_error: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class IngestResponse(BaseModel):
    document: DocumentOut = Field(..., description="The created document, with its storage path set.")
    content_hash: str = Field(..., description="SHA-256 of the ingested bytes.")
