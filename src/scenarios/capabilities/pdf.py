"""PDF text extraction with pdfplumber."""

from __future__ import annotations

import io

import pdfplumber
from pdfplumber.utils.exceptions import PdfminerException

from scenarios.config import get_logger
from scenarios.exceptions import TextExtractionError

logger = get_logger(__name__)


class PdfTextExtractor:
    """Extract the text layer of a screenplay PDF, one page after another."""

    def extract_raw_text(self, pdf_bytes: bytes) -> str:
        """Return the text of every page joined by newlines.

        Raises:
            TextExtractionError: If the bytes are not a readable PDF
        """
        if not pdf_bytes:
            raise TextExtractionError(
                message="Empty PDF document",
                hint="Upload the screenplay PDF file",
            )
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except (PdfminerException, ValueError, OSError) as e:
            raise TextExtractionError(
                message=f"Could not read PDF: {e}",
                hint="Scanned PDFs without a text layer need OCR first",
                details={"size": len(pdf_bytes)},
            ) from e

        text = "\n".join(pages)
        logger.info("Extracted PDF text", pages=len(pages), characters=len(text))
        return text
