"""
Dramatiq actor for background PDF text extraction.

A document handed to this job moves PROCESSING -> COMPLETED | FAILED. The job
reports its outcome only through the document store; nothing is raised back
to the ingestion request that enqueued it, and there are no automatic retries.
"""

import asyncio
import logging
import time
from uuid import UUID

import dramatiq

from app.core import queue  # noqa: F401 - Initialize Dramatiq broker for worker
from app.core.config import Settings
from app.core.errors import DocumentNotFoundError, ExtractionError, StorageError
from app.core.text import make_summary
from app.db import init_db
from app.models.document import TERMINAL_STATUSES, DocumentStatus
from app.processing.pdf import extract_pdf_text
from app.services.document_store import DocumentStore, document_store

logger = logging.getLogger(__name__)
settings = Settings()

_db_lock = asyncio.Lock()
_db_ready = False


async def _ensure_db() -> None:
    """Initialize Tortoise once per worker process, shared by all messages."""
    global _db_ready
    async with _db_lock:
        if not _db_ready:
            await init_db()
            _db_ready = True


async def _mark_failed(store: DocumentStore, doc_uuid: UUID, error: str) -> None:
    try:
        await store.set_status(doc_uuid, DocumentStatus.FAILED, error)
    except StorageError as save_error:
        # Nothing left to report through; the store keeps whatever it had.
        logger.error(f"Failed to mark document {doc_uuid} as FAILED: {save_error}")
        return
    logger.error(f"Document {doc_uuid} marked as FAILED: {error}")


async def _extract_document_job(document_id: str, store: DocumentStore = document_store) -> None:
    """
    Core logic for extracting a document's text.

    Separated from the Dramatiq actor so tests can await it directly.

    Args:
        document_id: The UUID of the document to process (as string)
    """
    doc_uuid = UUID(document_id)

    try:
        # Soft-deleted documents are still fetched: deletion does not cancel the job.
        document = await store.get(doc_uuid)
    except DocumentNotFoundError:
        logger.info(f"Document {document_id} not found. Skipping extraction.")
        return
    except StorageError as e:
        logger.error(f"Failed to load document {document_id}: {e}")
        await _mark_failed(store, doc_uuid, f"Failed to load document: {e}")
        return

    if document.status in TERMINAL_STATUSES:
        logger.info(f"Document {document_id} already {document.status.value}. Skipping extraction.")
        return

    if not document.file_path:
        await _mark_failed(store, doc_uuid, "PDF extraction failed: document has no stored file")
        return

    # 1. Advisory transition; extraction goes ahead even if it cannot be recorded.
    try:
        await store.set_status(doc_uuid, DocumentStatus.PROCESSING)
        logger.info(f"Processing document {document_id}")
    except StorageError as e:
        logger.warning(f"Could not mark document {document_id} as PROCESSING, continuing: {e}")

    # 2. Extract text off the event loop. The worker thread cannot be cancelled,
    # so it also stops on its own at the next page once the deadline passes.
    time_limit = settings.EXTRACTION_TIME_LIMIT_MS / 1000
    try:
        text = await asyncio.wait_for(
            asyncio.to_thread(extract_pdf_text, document.file_path, time.monotonic() + time_limit),
            timeout=time_limit,
        )
    except ExtractionError as e:
        logger.error(f"Failed to extract PDF text for document {document_id}: {e}", exc_info=True)
        await _mark_failed(store, doc_uuid, f"PDF extraction failed: {e}")
        return
    except asyncio.TimeoutError:
        await _mark_failed(
            store, doc_uuid, f"PDF extraction timed out after {settings.EXTRACTION_TIME_LIMIT_MS} ms"
        )
        return

    if not text.strip():
        await _mark_failed(store, doc_uuid, "PDF extraction failed: no text could be extracted")
        return

    # 3. Persist content and summary, completing the document
    summary = make_summary(text, settings.SUMMARY_MAX_CHARS)
    try:
        await store.set_content_and_summary(doc_uuid, text, summary)
    except StorageError as e:
        logger.error(f"Failed to update document content for {document_id}: {e}", exc_info=True)
        await _mark_failed(store, doc_uuid, f"Failed to save content: {e}")
        return

    logger.info(f"Successfully extracted {len(text)} characters from document {document_id}")


@dramatiq.actor(max_retries=0)
async def extract_document(document_id: str) -> None:
    """
    Dramatiq actor for extracting a PDF document's text asynchronously.

    Args:
        document_id: The UUID of the document to process (as string)
    """
    await _ensure_db()
    await _extract_document_job(document_id)
