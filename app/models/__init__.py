from .base import TimestampedModel, UUIDModel
from .document import Document, DocumentStatus
from .user import User

__all__ = ["TimestampedModel", "UUIDModel", "Document", "DocumentStatus", "User"]
