"""
PDF text extraction.

Thin wrapper over pdfplumber. Failures on individual pages are skipped so a
partially readable PDF still yields text; only a document that cannot be
opened at all is an error.
"""

import logging
import time
from pathlib import Path

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError

from app.core.errors import ExtractionError

logger = logging.getLogger(__name__)

# pdfminer reports recoverable font and xref problems on its own loggers.
logging.getLogger("pdfminer").setLevel(logging.ERROR)


def extract_pdf_text(path: str | Path, deadline: float | None = None) -> str:
    """
    Extract plain text from every page of a PDF, in page order.

    Each page's text is followed by a newline. Pages whose extraction fails
    are left out.

    Args:
        path: Location of the PDF file
        deadline: Optional `time.monotonic()` value; checked before each page

    Returns:
        Concatenated page text

    Raises:
        ExtractionError: If the file cannot be read, is not a parseable PDF,
            or the deadline passes before every page is read
    """
    page_texts = []
    try:
        with pdfplumber.open(path) as pdf:
            for page_number, page in enumerate(pdf.pages, 1):
                if deadline is not None and time.monotonic() > deadline:
                    raise ExtractionError(f"Deadline passed before page {page_number}")
                try:
                    text = page.extract_text()
                except Exception as e:
                    logger.warning(f"Skipping page {page_number} of {path}: {e}")
                    continue
                page_texts.append((text or "") + "\n")
    except ExtractionError:
        raise
    except (OSError, PDFSyntaxError) as e:
        raise ExtractionError(f"Failed to load PDF: {e}") from e
    except Exception as e:
        raise ExtractionError(f"Failed to parse PDF: {e}") from e

    return "".join(page_texts)
