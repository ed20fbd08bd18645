import logging
from uuid import UUID

from tortoise import timezone
from tortoise.exceptions import BaseORMException, IntegrityError

from app.core.errors import DocumentNotFoundError, OwnerNotFoundError, StorageError
from app.models import Document, DocumentStatus, User

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Sole authority over document records.

    Every write is a single INSERT or UPDATE statement, so each call is atomic
    and concurrent calls against the same document are serialized by the
    database. The store keeps no state of its own; one instance may be shared
    freely between request handlers and background jobs, each call borrowing a
    connection from the pool for its duration.

    Updates that match no row raise `DocumentNotFoundError`. Updates address
    documents by id alone, so a soft-deleted document can still be finished
    by a job that was already running when it was deleted.
    """

    async def create(
        self,
        owner_id: UUID,
        title: str,
        file_name: str,
        file_size_bytes: int,
        file_type: str,
        mime_type: str,
    ) -> Document:
        """
        Insert a new document in UPLOADING status.

        Raises:
            OwnerNotFoundError: If `owner_id` does not reference an existing user
            StorageError: For any other database failure
        """
        try:
            document = await Document.create(
                user_id=owner_id,
                title=title,
                file_name=file_name,
                file_size_bytes=file_size_bytes,
                file_type=file_type,
                mime_type=mime_type,
                status=DocumentStatus.UPLOADING,
            )
        except IntegrityError as e:
            if not await User.exists(id=owner_id):
                raise OwnerNotFoundError(owner_id) from e
            raise StorageError(f"Failed to create document: {e}") from e
        except BaseORMException as e:
            raise StorageError(f"Failed to create document: {e}") from e

        logger.info(f"Created document with ID: {document.id}")
        return document

    async def get(self, document_id: UUID, owner_id: UUID | None = None) -> Document:
        """
        Fetch one document.

        When `owner_id` is given the lookup is scoped to that owner and
        soft-deleted documents read as missing, as they would in a listing.
        """
        query = Document.filter(id=document_id)
        if owner_id is not None:
            query = query.filter(user_id=owner_id, deleted_at__isnull=True)

        try:
            document = await query.first()
        except BaseORMException as e:
            raise StorageError(f"Failed to load document {document_id}: {e}") from e

        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def set_file_path(self, document_id: UUID, file_path: str) -> None:
        await self._update(document_id, file_path=file_path)

    async def set_content_and_summary(self, document_id: UUID, content: str, summary: str) -> None:
        """Store extracted text and its summary, completing the document."""
        await self._update(
            document_id,
            content=content,
            summary=summary,
            status=DocumentStatus.COMPLETED,
        )

    async def set_status(self, document_id: UUID, status: DocumentStatus, error: str | None = None) -> None:
        """Set the status; `processing_error` is replaced by `error`, cleared when it is None."""
        await self._update(document_id, status=status, processing_error=error)

    async def list_by_owner(self, owner_id: UUID, status: DocumentStatus | None = None) -> list[Document]:
        """
        All live documents of an owner, most recently created first.

        Args:
            owner_id: The owning user
            status: Optional status to filter on

        Returns:
            Documents without a `deleted_at` marker, ordered by `created_at` descending
        """
        query = Document.filter(user_id=owner_id, deleted_at__isnull=True)
        if status is not None:
            query = query.filter(status=status)

        try:
            return await query.order_by("-created_at")
        except BaseORMException as e:
            raise StorageError(f"Failed to list documents for owner {owner_id}: {e}") from e

    async def soft_delete(self, document_id: UUID, owner_id: UUID) -> bool:
        """
        Hide a document from listings without removing its row.

        Returns:
            True if a live document was marked deleted, False if none matched
        """
        now = timezone.now()
        try:
            updated = await Document.filter(id=document_id, user_id=owner_id, deleted_at__isnull=True).update(
                deleted_at=now, updated_at=now
            )
        except BaseORMException as e:
            raise StorageError(f"Failed to delete document {document_id}: {e}") from e

        if updated:
            logger.info(f"Soft-deleted document {document_id}")
        return bool(updated)

    async def _update(self, document_id: UUID, **values) -> None:
        try:
            updated = await Document.filter(id=document_id).update(updated_at=timezone.now(), **values)
        except BaseORMException as e:
            raise StorageError(f"Failed to update document {document_id}: {e}") from e

        if not updated:
            raise DocumentNotFoundError(document_id)


document_store = DocumentStore()
