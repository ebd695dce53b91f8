"""Assignment parsing endpoint with early acknowledgment."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from syllabug.api.coordinator import ExtractionCoordinator
from syllabug.api.dependencies import get_invoker, settings_dependency
from syllabug.api.errors import APIError
from syllabug.api.models import ParseAssignmentsRequest
from syllabug.config import Settings
from syllabug.extraction.invoker import ModelInvoker
from syllabug.extraction.pipeline import extract_assignments

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse-assignments")
async def parse_assignments(
    body: ParseAssignmentsRequest,
    app_settings: Annotated[Settings, Depends(settings_dependency)],
    invoker: Annotated[ModelInvoker | None, Depends(get_invoker)],
    t: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """Extract assignments from syllabus text.

    Returns 200 with the records when extraction finishes within
    ``EARLY_ACK_SECONDS``; otherwise 202 with a placeholder row while the
    server keeps working (the final result is only logged).
    """
    request_id = t or uuid.uuid4().hex[:8]
    text = body.text
    if not isinstance(text, str) or not text.strip():
        raise APIError(400, "Valid syllabus text is required")

    logger.info("[%s] Parsing assignments from text (%d characters)", request_id, len(text))
    started = time.monotonic()

    coordinator = ExtractionCoordinator(
        lambda: extract_assignments(text, invoker, app_settings.max_prompt_chars),
        ack_after_seconds=app_settings.early_ack_seconds,
        request_id=request_id,
    )
    reply = await coordinator.run()

    logger.info(
        "[%s] Request answered with %d in %.0fms",
        request_id,
        reply.status_code,
        (time.monotonic() - started) * 1000,
    )
    return JSONResponse(status_code=reply.status_code, content=reply.body)
