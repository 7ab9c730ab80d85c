"""
Upload storage — writes an incoming PDF to the upload directory.

The stored file is consumed (and deleted) by tools.pdf_reader.parse_pdf().
"""

import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from config import Settings

logger = logging.getLogger("quiz.uploads")

PDF_MIME_TYPE = "application/pdf"
_CHUNK_SIZE = 1024 * 1024


class UploadError(Exception):
    """Rejected upload; carries the HTTP status the route should answer with."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    filename: str
    original_name: str
    size: int
    content_type: str


def _unique_filename(original_name: str) -> str:
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}"
    return suffix + Path(original_name).suffix


async def save_upload(file: UploadFile, settings: Settings) -> StoredUpload:
    """Validate and persist an uploaded PDF.

    Raises:
        UploadError: wrong MIME type (400) or file larger than the limit (413).
    """
    logger.info("Checking file type: %s", file.content_type)
    if file.content_type != PDF_MIME_TYPE:
        logger.info("File rejected, not a PDF")
        raise UploadError("Only PDF files are allowed!")

    original_name = file.filename or "upload.pdf"
    filename = _unique_filename(original_name)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    path = settings.upload_dir / filename

    size = 0
    try:
        with open(path, "wb") as out:
            while chunk := await file.read(_CHUNK_SIZE):
                size += len(chunk)
                if size > settings.max_upload_bytes:
                    raise UploadError(
                        f"File too large. Maximum size is {settings.max_upload_bytes // (1024 * 1024)}MB.",
                        status_code=413,
                    )
                out.write(chunk)
    except BaseException:
        # No partial file survives a failed write
        path.unlink(missing_ok=True)
        raise

    logger.info(
        "File uploaded: original=%s saved=%s path=%s size=%d bytes",
        original_name, filename, path, size,
    )
    return StoredUpload(
        path=path,
        filename=filename,
        original_name=original_name,
        size=size,
        content_type=file.content_type,
    )
