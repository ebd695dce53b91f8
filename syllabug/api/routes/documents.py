"""Upload endpoint: recover plain text from a PDF or DOCX syllabus."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from syllabug.api.dependencies import settings_dependency
from syllabug.api.errors import APIError
from syllabug.api.models import ExtractTextResponse
from syllabug.config import Settings
from syllabug.ingestion.documents import (
    DocumentParseError,
    UnsupportedDocumentError,
    extract_text,
    resolve_content_type,
)

router = APIRouter()


@router.post("/extract-text", response_model=ExtractTextResponse)
async def extract_text_endpoint(
    app_settings: Annotated[Settings, Depends(settings_dependency)],
    syllabus: Annotated[UploadFile | None, File()] = None,
) -> ExtractTextResponse:
    """Extract the text of an uploaded syllabus.

    The file must be sent as multipart field ``syllabus``. Only PDF and DOCX
    are accepted, up to ``MAX_FILE_SIZE_MB``.
    """
    if syllabus is None:
        raise APIError(400, "No file uploaded")

    try:
        mime_type = resolve_content_type(syllabus.content_type, syllabus.filename)
    except UnsupportedDocumentError as exc:
        raise APIError(400, str(exc)) from exc

    raw = await syllabus.read()
    if len(raw) > app_settings.max_file_size_bytes:
        raise APIError(
            413, f"File too large. Maximum size is {app_settings.max_file_size_mb} MB."
        )

    # pdfplumber / python-docx are synchronous; keep them off the event loop.
    try:
        text = await asyncio.to_thread(extract_text, raw, mime_type, syllabus.filename)
    except DocumentParseError as exc:
        raise APIError(500, str(exc)) from exc

    return ExtractTextResponse(
        message="Text extraction successful",
        filename=syllabus.filename,
        mimeType=mime_type,
        text=text,
    )
