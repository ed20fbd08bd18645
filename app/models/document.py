from enum import Enum

from tortoise import fields

from .base import TimestampedModel


class DocumentStatus(str, Enum):
    """
    Document processing lifecycle.

    UPLOADING -> PROCESSING -> COMPLETED | FAILED. Only the extraction job
    moves a document out of UPLOADING, and the two terminal states are final.
    """

    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED})


class Document(TimestampedModel):
    user = fields.ForeignKeyField("models.User", related_name="documents", on_delete=fields.CASCADE)
    workspace_id = fields.UUIDField(null=True)

    title = fields.CharField(max_length=500)
    file_name = fields.CharField(max_length=255, null=True)
    file_type = fields.CharField(max_length=20, null=True, description="Uppercased extension label, e.g. PDF")
    mime_type = fields.CharField(max_length=100, null=True)

    file_path = fields.CharField(max_length=1000, null=True, description="Location in managed storage")
    file_size_bytes = fields.BigIntField(null=True)

    content = fields.TextField(null=True)
    summary = fields.TextField(null=True)

    status = fields.CharEnumField(DocumentStatus, max_length=20, default=DocumentStatus.UPLOADING)
    processing_error = fields.TextField(null=True, description="Set only while status is FAILED")

    deleted_at = fields.DatetimeField(null=True, description="Soft-delete marker")

    class Meta:
        table = "documents"
        table_description = "Documents Table"
        ordering = ["-created_at"]
