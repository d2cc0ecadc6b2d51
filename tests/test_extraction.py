"""Unit tests for text extraction dispatch."""

import io

import pytest
from docx import Document
from PIL import Image

from resume_analyzer import extraction
from resume_analyzer.extraction import ExtractionError, TextExtractor, UnsupportedFileTypeError


@pytest.fixture
def extractor():
    return TextExtractor()


@pytest.mark.unit
def test_plain_text(extractor):
    assert extractor.extract(b"Skills: Python", "text/plain") == "Skills: Python"


@pytest.mark.unit
def test_mime_parameters_are_ignored(extractor):
    text = extractor.extract("Education: café".encode("utf-8"), "text/plain; charset=utf-8")
    assert text == "Education: café"


@pytest.mark.unit
def test_invalid_utf8_is_replaced(extractor):
    assert extractor.extract(b"abc\xff", "text/plain") == "abc\ufffd"


@pytest.mark.unit
@pytest.mark.parametrize(
    "mime, filename, expected",
    [
        ("application/octet-stream", "cv.txt", "text/plain"),
        ("", "CV.PDF", "application/pdf"),
        ("text/rtf", "cv.rtf", "application/rtf"),
        ("image/jpg", "cv.jpg", "image/jpeg"),
        ("application/octet-stream", "cv.unknown", "application/octet-stream"),
    ],
)
def test_resolve_type(extractor, mime, filename, expected):
    """Test MIME normalisation and the extension fallback."""
    assert extractor.resolve_type(mime, filename) == expected


@pytest.mark.unit
def test_docx(extractor):
    document = Document()
    document.add_paragraph("Experience: Acme Corp")
    document.add_paragraph("Skills: Python")
    buffer = io.BytesIO()
    document.save(buffer)

    text = extractor.extract(buffer.getvalue(), extraction.DOCX, "cv.docx")

    assert "Experience: Acme Corp" in text
    assert "Skills: Python" in text


@pytest.mark.unit
def test_rtf(extractor):
    text = extractor.extract(rb"{\rtf1\ansi Projects: resume parser}", "application/rtf")
    assert "Projects: resume parser" in text


@pytest.mark.unit
def test_image_goes_through_ocr(extractor, monkeypatch):
    """Test that images are converted to RGB and handed to tesseract."""
    seen = {}

    def fake_ocr(img, lang=None):
        seen["mode"] = img.mode
        seen["lang"] = lang
        return "Email: jane@example.com"

    monkeypatch.setattr(extraction.pytesseract, "image_to_string", fake_ocr)
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 4)).save(buffer, format="PNG")

    text = extractor.extract(buffer.getvalue(), "image/png", "cv.png")

    assert text == "Email: jane@example.com"
    assert seen == {"mode": "RGB", "lang": "eng"}


@pytest.mark.unit
def test_legacy_word_is_unsupported(extractor):
    with pytest.raises(UnsupportedFileTypeError, match="application/msword"):
        extractor.extract(b"\xd0\xcf\x11\xe0", "application/msword", "cv.doc")


@pytest.mark.unit
def test_unsupported_is_an_extraction_error(extractor):
    with pytest.raises(ExtractionError):
        extractor.extract(b"", "application/zip", "cv.zip")


@pytest.mark.unit
def test_corrupt_pdf(extractor):
    """Test that library failures are wrapped with the original chained."""
    with pytest.raises(ExtractionError) as excinfo:
        extractor.extract(b"this is not a pdf", "application/pdf", "cv.pdf")

    assert not isinstance(excinfo.value, UnsupportedFileTypeError)
    assert excinfo.value.__cause__ is not None
