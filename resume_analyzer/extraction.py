import io
import logging
import os

import pdfplumber
import pytesseract
from docx import Document
from PIL import Image
from striprtf.striprtf import rtf_to_text

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT = "text/plain"
RTF = "application/rtf"
PNG = "image/png"
JPEG = "image/jpeg"

_MIME_ALIASES = {
    "text/rtf": RTF,
    "image/jpg": JPEG,
    "image/pjpeg": JPEG,
}

_EXTENSION_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TEXT,
    ".rtf": RTF,
    ".png": PNG,
    ".jpg": JPEG,
    ".jpeg": JPEG,
}

_GENERIC_TYPES = {"", "application/octet-stream"}


class ExtractionError(Exception):
    """Raised when text cannot be extracted from an uploaded file."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no extractor handles the file's type."""


def _extract_pdf(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _extract_rtf(data: bytes) -> str:
    return rtf_to_text(data.decode("utf-8", errors="replace"))


def _extract_image(data: bytes) -> str:
    img = Image.open(io.BytesIO(data))
    if img.mode == "RGBA":
        img = img.convert("RGB")
    return pytesseract.image_to_string(img, lang="eng")


class TextExtractor:
    """Turns an uploaded file into plain text, dispatching on its MIME type."""

    def __init__(self):
        self._handlers = {
            PDF: _extract_pdf,
            DOCX: _extract_docx,
            TEXT: _extract_text,
            RTF: _extract_rtf,
            PNG: _extract_image,
            JPEG: _extract_image,
        }

    def resolve_type(self, mime_type: str, filename: str = "") -> str:
        """Normalise the declared MIME type, guessing from the extension when it is generic."""
        mime = (mime_type or "").split(";")[0].strip().lower()
        mime = _MIME_ALIASES.get(mime, mime)
        if mime in _GENERIC_TYPES and filename:
            ext = os.path.splitext(filename)[1].lower()
            mime = _EXTENSION_TYPES.get(ext, mime)
        return mime

    def extract(self, data: bytes, mime_type: str, filename: str = "") -> str:
        mime = self.resolve_type(mime_type, filename)
        handler = self._handlers.get(mime)
        if handler is None:
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {mime_type or 'unknown'}"
            )

        try:
            text = handler(data)
        except Exception as exc:
            raise ExtractionError(f"Could not read {mime} file: {exc}") from exc

        logger.debug("Extracted %d chars from %s (%s)", len(text), filename, mime)
        return text
