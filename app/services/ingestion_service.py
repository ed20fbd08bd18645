import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from dramatiq.errors import DramatiqError
from redis.exceptions import RedisError

from app.core import filetypes, hashing
from app.core.config import Settings
from app.core.errors import FileAccessError, InvalidIdentifierError, SourceNotFoundError, StorageError
from app.models import Document, DocumentStatus
from app.services.document_store import DocumentStore, document_store

logger = logging.getLogger(__name__)
settings = Settings()

HASH_PREFIX_LENGTH = 8


@dataclass
class SourceFileInfo:
    """Metadata collected from a source file before it is copied."""

    path: Path
    file_name: str
    size_bytes: int
    mime_type: str
    file_type: str
    content_hash: str

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == filetypes.PDF_MIME or self.file_type == "PDF"


@dataclass
class IngestResult:
    """Result of an ingestion: the stored document and the hash of its bytes."""

    document: Document
    content_hash: str


def parse_owner_id(value: str) -> UUID:
    try:
        return UUID(value)
    except (TypeError, ValueError) as e:
        raise InvalidIdentifierError(value) from e


def storage_file_name(content_hash: str, file_name: str) -> str:
    """
    Managed storage name: `<first 8 hex chars of the hash>_<original name>`.

    Identical bytes under the same name map to the same file; different bytes
    under the same name do not collide.
    """
    return f"{content_hash[:HASH_PREFIX_LENGTH]}_{file_name}"


def inspect_source(source_path: Path) -> SourceFileInfo:
    """
    Read size, classify and hash a source file.

    Blocking; run it off the event loop.

    Raises:
        SourceNotFoundError: If the path does not exist
        FileAccessError: If the file cannot be stat'ed or read
    """
    if not source_path.exists():
        raise SourceNotFoundError(str(source_path))

    try:
        size_bytes = source_path.stat().st_size
        mime_type = filetypes.detect_mime_type(source_path)
        content_hash = hashing.sha256_file(source_path)
    except OSError as e:
        raise FileAccessError(f"Failed to read {source_path}: {e}") from e

    return SourceFileInfo(
        path=source_path,
        file_name=source_path.name or "unknown",
        size_bytes=size_bytes,
        mime_type=mime_type,
        file_type=filetypes.file_type_label(source_path),
        content_hash=content_hash,
    )


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")


class IngestionService:
    """
    Service for orchestrating the ingestion of files into managed storage.
    Handles validation, hashing, classification, copying and persistence, and
    hands PDFs to the extraction job.
    """

    def __init__(self, store: DocumentStore = document_store, documents_dir: str | Path | None = None):
        self.store = store
        self.documents_dir = Path(documents_dir or settings.DOCUMENTS_DIR).expanduser()

    def ensure_documents_dir(self) -> Path:
        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileAccessError(f"Failed to create documents directory {self.documents_dir}: {e}") from e
        return self.documents_dir

    def copy_to_storage(self, info: SourceFileInfo) -> tuple[Path, bool]:
        """
        Copy the source bytes into managed storage.

        Blocking; run it off the event loop.

        Returns:
            The destination path and whether it already existed before the copy

        Raises:
            FileAccessError: If the copy cannot complete. A partial file left
                behind at a previously unused destination is removed.
        """
        destination = self.ensure_documents_dir() / storage_file_name(info.content_hash, info.file_name)
        existed = destination.exists()

        try:
            shutil.copyfile(info.path, destination)
        except OSError as e:
            if not existed:
                _remove_quietly(destination)
            raise FileAccessError(f"Failed to copy {info.path} to {destination}: {e}") from e

        return destination, existed

    async def ingest(self, owner_id: str | UUID, source_path: str | Path) -> IngestResult:
        """
        Ingest a file for an owner.

        Copies the file into managed storage, creates its document record and
        records the storage path. PDFs are then handed to the extraction job;
        this call does not wait for it.

        Args:
            owner_id: The owning user's identifier
            source_path: Path of the file to ingest

        Returns:
            IngestResult with the created document (file_path set) and content hash

        Raises:
            InvalidIdentifierError: If `owner_id` is not a valid identifier
            SourceNotFoundError: If `source_path` does not exist
            FileAccessError: If reading or copying the file fails
            StorageError: If the document record cannot be created or updated
        """
        owner_uuid = owner_id if isinstance(owner_id, UUID) else parse_owner_id(owner_id)
        source = Path(source_path)

        # 1. Validate, stat, classify and hash the source
        info = await asyncio.to_thread(inspect_source, source)

        # 2. Copy into managed storage under the content-addressed name
        destination, existed = await asyncio.to_thread(self.copy_to_storage, info)

        # 3. Create the document record
        try:
            document = await self.store.create(
                owner_id=owner_uuid,
                title=info.file_name,
                file_name=info.file_name,
                file_size_bytes=info.size_bytes,
                file_type=info.file_type,
                mime_type=info.mime_type,
            )
        except StorageError:
            # Another document may already own a pre-existing destination.
            if not existed:
                _remove_quietly(destination)
            raise

        # 4. Record where the bytes live
        await self.store.set_file_path(document.id, str(destination))
        document = await self.store.get(document.id)

        # 5. Hand PDFs to the background extraction job
        if info.is_pdf:
            await self.schedule_extraction(document)

        return IngestResult(document=document, content_hash=info.content_hash)

    async def schedule_extraction(self, document: Document) -> None:
        """
        Enqueue the extraction job for a document without waiting on it.

        A broker failure does not fail the ingestion; the document is marked
        FAILED instead, so it never sits in UPLOADING forever.
        """
        # Import here to avoid circular dependency
        from app.jobs.extraction_job import extract_document

        try:
            extract_document.send(str(document.id))
        except (DramatiqError, RedisError) as e:
            logger.error(f"Failed to enqueue extraction for document {document.id}: {e}", exc_info=True)
            error = f"Failed to schedule extraction: {e}"
            try:
                await self.store.set_status(document.id, DocumentStatus.FAILED, error)
            except StorageError as save_error:
                logger.error(f"Failed to update document status: {save_error}")
                return
            document.status = DocumentStatus.FAILED
            document.processing_error = error
            return

        logger.info(f"Enqueued extraction job for document {document.id}")
