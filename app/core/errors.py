"""Exception hierarchy shared by the ingestion path and the extraction worker."""


class DocVaultError(Exception):
    """Base class for every error raised by this application."""


class ValidationError(DocVaultError):
    pass


class SourceNotFoundError(ValidationError):
    def __init__(self, path: str):
        super().__init__(f"Source file does not exist: {path}")
        self.path = path


class InvalidIdentifierError(ValidationError):
    def __init__(self, value: str):
        super().__init__(f"Malformed identifier: {value!r}")
        self.value = value


class FileAccessError(DocVaultError):
    """A read, copy or metadata operation on the file system failed."""


class StorageError(DocVaultError):
    """A document record could not be created, read or updated."""


class OwnerNotFoundError(StorageError):
    def __init__(self, owner_id):
        super().__init__(f"Owner {owner_id} does not exist")
        self.owner_id = owner_id


class DocumentNotFoundError(StorageError):
    def __init__(self, document_id):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class ExtractionError(DocVaultError):
    """The document as a whole could not be opened or parsed."""
