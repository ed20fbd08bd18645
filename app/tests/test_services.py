"""Tests for the ingestion service."""

import os
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from dramatiq.errors import BrokerConnectionError

from app.core.errors import (
    FileAccessError,
    InvalidIdentifierError,
    OwnerNotFoundError,
    SourceNotFoundError,
    StorageError,
)
from app.core.hashing import sha256_file
from app.models import Document, DocumentStatus
from app.services.document_store import DocumentStore
from app.services.ingestion_service import IngestionService, storage_file_name

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


@pytest.fixture
def service(documents_dir):
    return IngestionService(documents_dir=documents_dir)


@pytest.fixture
def mock_extract_actor():
    """Mock the extraction actor so no message reaches the broker."""
    with patch("app.jobs.extraction_job.extract_document") as mock_actor:
        yield mock_actor


def test_storage_file_name_uses_hash_prefix():
    assert storage_file_name("0123456789abcdef", "notes.txt") == "01234567_notes.txt"


class TestIngest:
    async def test_ingest_text_file(self, service, owner, write_file, documents_dir, mock_extract_actor):
        """Test ingesting a plain text file: stored, recorded, no extraction scheduled."""
        source = write_file("note.txt", b"0123456789")

        result = await service.ingest(str(owner.id), str(source))

        document = result.document
        assert result.content_hash == sha256_file(source)
        assert document.file_type == "TXT"
        assert document.mime_type == "text/plain"
        assert document.file_name == "note.txt"
        assert document.title == "note.txt"
        assert document.file_size_bytes == 10
        assert document.status == DocumentStatus.UPLOADING

        expected_path = documents_dir / f"{result.content_hash[:8]}_note.txt"
        assert document.file_path == str(expected_path)
        assert expected_path.read_bytes() == b"0123456789"

        stored = await Document.get(id=document.id)
        assert stored.file_path == str(expected_path)
        assert stored.status == DocumentStatus.UPLOADING

        mock_extract_actor.send.assert_not_called()

    async def test_returned_document_matches_stored_row(self, service, owner, write_file, mock_extract_actor):
        source = write_file("note.txt", b"fresh timestamps")

        result = await service.ingest(owner.id, source)

        stored = await Document.get(id=result.document.id)
        assert result.document.updated_at == stored.updated_at
        assert result.document.updated_at >= result.document.created_at

    async def test_ingest_pdf_enqueues_extraction(self, service, owner, write_file, mock_extract_actor):
        source = write_file("paper.pdf", PDF_BYTES)

        result = await service.ingest(str(owner.id), str(source))

        assert result.document.file_type == "PDF"
        assert result.document.mime_type == "application/pdf"
        assert result.document.status == DocumentStatus.UPLOADING
        mock_extract_actor.send.assert_called_once_with(str(result.document.id))

    async def test_pdf_detected_by_content_alone(self, service, owner, write_file, mock_extract_actor):
        source = write_file("scan", PDF_BYTES)

        result = await service.ingest(owner.id, source)

        assert result.document.file_type == "FILE"
        assert result.document.mime_type == "application/pdf"
        mock_extract_actor.send.assert_called_once()

    async def test_ingest_accepts_uuid_owner(self, service, owner, write_file, mock_extract_actor):
        source = write_file("a.md", b"# title")
        result = await service.ingest(owner.id, source)
        assert result.document.user_id == owner.id
        assert result.document.mime_type == "text/markdown"

    async def test_ingest_missing_source_creates_nothing(self, service, owner, tmp_path, documents_dir):
        with pytest.raises(SourceNotFoundError):
            await service.ingest(str(owner.id), str(tmp_path / "missing.pdf"))

        assert await Document.all().count() == 0
        assert not documents_dir.exists() or not any(documents_dir.iterdir())

    async def test_ingest_malformed_owner_id(self, service, write_file):
        source = write_file("note.txt", b"hello")
        with pytest.raises(InvalidIdentifierError):
            await service.ingest("not-a-uuid", str(source))
        assert await Document.all().count() == 0

    async def test_same_content_and_name_share_destination(self, service, owner, write_file, mock_extract_actor):
        """Identical bytes under one name reuse the file name but still get a new record."""
        source = write_file("dup.txt", b"identical bytes")

        first = await service.ingest(owner.id, source)
        second = await service.ingest(owner.id, source)

        assert first.document.id != second.document.id
        assert first.document.file_path == second.document.file_path
        assert await Document.filter(user_id=owner.id).count() == 2

    async def test_different_content_same_name_do_not_collide(
        self, service, owner, tmp_path, documents_dir, mock_extract_actor
    ):
        one = tmp_path / "one"
        two = tmp_path / "two"
        one.mkdir()
        two.mkdir()
        (one / "report.txt").write_bytes(b"first version")
        (two / "report.txt").write_bytes(b"second version")

        first = await service.ingest(owner.id, one / "report.txt")
        second = await service.ingest(owner.id, two / "report.txt")

        assert first.document.file_path != second.document.file_path
        assert sorted(os.listdir(documents_dir)) == sorted(
            [os.path.basename(first.document.file_path), os.path.basename(second.document.file_path)]
        )

    async def test_unknown_owner_removes_copied_file(self, service, write_file, documents_dir):
        source = write_file("note.txt", b"orphan candidate")

        with pytest.raises(OwnerNotFoundError):
            await service.ingest(uuid.uuid4(), source)

        assert await Document.all().count() == 0
        assert list(documents_dir.iterdir()) == []

    async def test_failed_create_keeps_preexisting_destination(
        self, service, owner, write_file, documents_dir, mock_extract_actor
    ):
        source = write_file("shared.txt", b"shared bytes")
        first = await service.ingest(owner.id, source)

        with pytest.raises(OwnerNotFoundError):
            await service.ingest(uuid.uuid4(), source)

        assert os.path.exists(first.document.file_path)

    async def test_copy_failure_raises_file_access_error(self, service, owner, write_file, documents_dir):
        source = write_file("note.txt", b"will not copy")

        with patch("app.services.ingestion_service.shutil.copyfile", side_effect=OSError("disk full")):
            with pytest.raises(FileAccessError, match="disk full"):
                await service.ingest(owner.id, source)

        assert await Document.all().count() == 0

    async def test_read_failure_raises_file_access_error(self, service, owner, write_file):
        source = write_file("note.txt", b"unreadable")

        with patch("app.core.hashing.open", side_effect=PermissionError("denied"), create=True):
            with pytest.raises(FileAccessError) as exc_info:
                await service.ingest(owner.id, source)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert await Document.all().count() == 0

    async def test_set_file_path_failure_surfaces(self, owner, write_file, documents_dir):
        store = DocumentStore()
        store.set_file_path = AsyncMock(side_effect=StorageError("database busy"))
        service = IngestionService(store=store, documents_dir=documents_dir)
        source = write_file("note.txt", b"hello")

        with pytest.raises(StorageError, match="database busy"):
            await service.ingest(owner.id, source)


class TestScheduleExtraction:
    async def test_broker_failure_marks_document_failed(self, service, owner, write_file, mock_extract_actor):
        """Ingestion still succeeds when the job cannot be enqueued."""
        mock_extract_actor.send.side_effect = BrokerConnectionError("redis unavailable")
        source = write_file("paper.pdf", PDF_BYTES)

        result = await service.ingest(owner.id, source)

        assert result.document.status == DocumentStatus.FAILED
        stored = await Document.get(id=result.document.id)
        assert stored.status == DocumentStatus.FAILED
        assert "Failed to schedule extraction" in stored.processing_error
        assert stored.file_path == result.document.file_path

    async def test_send_goes_through_stub_broker(self, service, owner, write_file):
        """Without mocking, the actor message lands on the test broker's queue."""
        from app.core.queue import dramatiq_broker

        dramatiq_broker.flush_all()
        source = write_file("paper.pdf", PDF_BYTES)

        result = await service.ingest(owner.id, source)

        queue = dramatiq_broker.queues["default"]
        assert queue.qsize() == 1
        assert result.document.status == DocumentStatus.UPLOADING
        dramatiq_broker.flush_all()
