"""Plain-text extraction from uploaded syllabus documents (PDF and DOCX)."""

from __future__ import annotations

import io
import logging

import docx
import pdfplumber

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_TYPES = {PDF_MIME: "pdf", DOCX_MIME: "docx"}
EXTENSION_TYPES = {"pdf": PDF_MIME, "docx": DOCX_MIME}


class UnsupportedDocumentError(ValueError):
    """The upload is neither a PDF nor a DOCX file."""


class DocumentParseError(Exception):
    """The document has a supported type but its text could not be read."""


def resolve_content_type(content_type: str | None, filename: str | None = None) -> str:
    """Return the canonical MIME type for an upload.

    The declared content type wins; browsers sometimes send
    ``application/octet-stream``, in which case the file extension decides.

    Raises:
        UnsupportedDocumentError: Neither the type nor the extension is supported.
    """
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared in SUPPORTED_TYPES:
        return declared

    name = filename or ""
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if ext in EXTENSION_TYPES:
        return EXTENSION_TYPES[ext]

    raise UnsupportedDocumentError("Only PDF and DOCX files are allowed")


def extract_text_from_pdf(raw: bytes) -> str:
    try:
        with pdfplumber.open(io.BytesIO(raw)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        raise DocumentParseError("Failed to extract text from PDF") from exc
    return "\n".join(pages)


def extract_text_from_docx(raw: bytes) -> str:
    """Paragraph text followed by table rows (cells joined by spaces)."""
    try:
        document = docx.Document(io.BytesIO(raw))
    except Exception as exc:
        raise DocumentParseError("Failed to extract text from DOCX") from exc

    lines = [para.text for para in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append("   ".join(cells))
    return "\n".join(lines)


def extract_text(raw: bytes, content_type: str | None, filename: str | None = None) -> str:
    """Extract plain text from a PDF or DOCX upload.

    Args:
        raw: Uploaded file bytes.
        content_type: Declared MIME type of the upload.
        filename: Original filename, used when the MIME type is inconclusive.

    Returns:
        The document's text.

    Raises:
        UnsupportedDocumentError: The file is not a PDF or DOCX.
        DocumentParseError: The file could not be parsed.
    """
    mime_type = resolve_content_type(content_type, filename)
    if mime_type == PDF_MIME:
        logger.info("Extracting text from PDF %s", filename)
        text = extract_text_from_pdf(raw)
    else:
        logger.info("Extracting text from DOCX %s", filename)
        text = extract_text_from_docx(raw)
    logger.info("Text extraction complete. Extracted %d characters", len(text))
    return text
