import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Response

from app.core.errors import (
    DocumentNotFoundError,
    FileAccessError,
    OwnerNotFoundError,
    SourceNotFoundError,
    StorageError,
    ValidationError,
)
from app.models import DocumentStatus
from app.schemas.document import DocumentOut, IngestRequest, IngestResponse
from app.services.document_store import document_store
from app.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents")
ingestion_service = IngestionService()


@router.post("/ingest", status_code=201, response_model=IngestResponse)
async def ingest(payload: IngestRequest) -> IngestResponse:
    """
    Ingests a file from the local file system.

    The file is copied into managed storage and a document record is created.
    PDFs are queued for background text extraction; the response is returned
    without waiting for it, with the document still in `uploading` status.
    """
    try:
        result = await ingestion_service.ingest(payload.owner_id, payload.source_path)
    except SourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except OwnerNotFoundError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except FileAccessError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    return IngestResponse(
        document=DocumentOut.model_validate(result.document),
        content_hash=result.content_hash,
    )


@router.get("", response_model=list[DocumentOut])
async def list_documents(
    owner_id: UUID = Query(..., description="Owner whose documents to list."),
    status: DocumentStatus | None = Query(None, description="Only documents in this status."),
) -> list[DocumentOut]:
    """Lists an owner's documents, most recently created first. Soft-deleted documents are omitted."""
    try:
        documents = await document_store.list_by_owner(owner_id, status=status)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return [DocumentOut.model_validate(doc) for doc in documents]


@router.get("/{document_id}", response_model=DocumentOut)
async def get_document(document_id: UUID, owner_id: UUID = Query(...)) -> DocumentOut:
    try:
        document = await document_store.get(document_id, owner_id=owner_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return DocumentOut.model_validate(document)


@router.delete("/{document_id}", status_code=204)
async def delete_document(document_id: UUID, owner_id: UUID = Query(...)) -> Response:
    """Soft-deletes a document. Its stored file and any running extraction are left alone."""
    try:
        deleted = await document_store.soft_delete(document_id, owner_id)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    return Response(status_code=204)
