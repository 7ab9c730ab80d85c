"""
PDF text extraction.

  parse_pdf()      — extract an uploaded file from disk, trying pdfplumber then
                     PyPDF2, and delete the file afterwards
  validate_text()  — sanity checks for raw text submitted without a PDF
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Callable

import pdfplumber
from PyPDF2 import PdfReader

logger = logging.getLogger("quiz.pdf_reader")


class PDFParseError(Exception):
    """PDF could not be turned into text."""


class TextValidationError(ValueError):
    """Submitted text is unusable for quiz generation."""


# ---------------------------------------------------------------------------
# Extraction strategies — each takes raw bytes, returns plain text
# ---------------------------------------------------------------------------


def _extract_with_pdfplumber(pdf_bytes: bytes) -> str:
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def _extract_with_pypdf2(pdf_bytes: bytes) -> str:
    reader = PdfReader(BytesIO(pdf_bytes))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


_STRATEGIES: list[tuple[str, Callable[[bytes], str]]] = [
    ("pdfplumber", _extract_with_pdfplumber),
    ("PyPDF2", _extract_with_pypdf2),
]


def _resolve_inside(file_path: str | Path, base_dir: Path) -> Path:
    base = Path(base_dir).resolve()
    resolved = (base / file_path).resolve()
    if not resolved.is_relative_to(base) or resolved == base:
        raise PDFParseError("Invalid file path")
    return resolved


def _cleanup(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
        logger.info("Temporary file cleaned up: %s", path.name)
    except OSError as exc:
        logger.warning("Could not clean up file %s: %s", path, exc)


def parse_pdf(file_path: str | Path, base_dir: str | Path) -> str:
    """Extract text from an uploaded PDF stored under ``base_dir``.

    The file is removed whether extraction succeeds or not.

    Raises:
        PDFParseError: path outside base_dir, file missing, every strategy
            failed, or the PDF holds no text. Message is prefixed with
            "PDF parsing failed: ".
    """
    resolved: Path | None = None
    try:
        resolved = _resolve_inside(file_path, Path(base_dir))
        if not resolved.exists():
            raise PDFParseError(f"File not found: {resolved}")

        pdf_bytes = resolved.read_bytes()
        logger.info("Read %s (%d bytes)", resolved.name, len(pdf_bytes))

        text = None
        for name, strategy in _STRATEGIES:
            try:
                text = strategy(pdf_bytes)
                logger.info("PDF extracted with %s", name)
                break
            except Exception as exc:
                logger.info("%s extraction failed: %s", name, exc)

        if text is None:
            raise PDFParseError("All PDF parsing methods failed. Please check your PDF file and try again.")
        if not text.strip():
            raise PDFParseError("No text content found in PDF - the PDF might be image-based or corrupted")

        logger.info("PDF processing completed, text length: %d", len(text))
        return text.strip()

    except (PDFParseError, OSError) as exc:
        logger.error("PDF parsing failed: %s", exc)
        raise PDFParseError(f"PDF parsing failed: {exc}") from exc
    finally:
        if resolved is not None:
            _cleanup(resolved)


def validate_text(text, min_length: int = 50) -> str:
    """Return stripped text, or raise TextValidationError if it is unusable."""
    if not text or not isinstance(text, str):
        raise TextValidationError("Text must be a non-empty string")

    if len(text.strip()) < min_length:
        raise TextValidationError(
            f"Text must be at least {min_length} characters long to generate meaningful questions"
        )

    return text.strip()
