"""File type classification: MIME sniffing with an extension fallback."""

from pathlib import Path

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_MIME = "application/octet-stream"
NO_EXTENSION_LABEL = "FILE"

EXTENSION_MIME_TYPES = {
    "txt": "text/plain",
    "md": "text/markdown",
    "pdf": PDF_MIME,
    "docx": DOCX_MIME,
}

# Leading magic bytes of the binary formats we recognise without trusting the name.
_SIGNATURES = [
    (b"%PDF-", PDF_MIME),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x1f\x8b", "application/gzip"),
]
_ZIP_SIGNATURE = b"PK\x03\x04"
_HEADER_SIZE = 8192


def _sniff(header: bytes, extension: str) -> str | None:
    for signature, mime_type in _SIGNATURES:
        if header.startswith(signature):
            return mime_type

    if header.startswith(_ZIP_SIGNATURE):
        # OOXML documents are zip archives carrying a word/ part.
        if b"word/" in header or extension == "docx":
            return DOCX_MIME
        return "application/zip"

    return None


def detect_mime_type(path: str | Path) -> str:
    """
    Classify a file's content type.

    The leading bytes are matched against known signatures first; when none
    match, the extension decides and anything unknown is octet-stream.

    Raises:
        OSError: If the file cannot be opened or read
    """
    path = Path(path)
    with open(path, "rb") as f:
        header = f.read(_HEADER_SIZE)

    extension = path.suffix.lstrip(".").lower()
    sniffed = _sniff(header, extension)
    if sniffed:
        return sniffed

    return EXTENSION_MIME_TYPES.get(extension, DEFAULT_MIME)


def file_type_label(path: str | Path) -> str:
    """Uppercased extension, e.g. `report.pdf` -> `PDF`, or `FILE` when there is none."""
    extension = Path(path).suffix.lstrip(".")
    return extension.upper() if extension else NO_EXTENSION_LABEL
