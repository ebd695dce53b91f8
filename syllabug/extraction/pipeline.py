"""Extraction pipeline: prompt -> model -> normalized records."""

from __future__ import annotations

import logging

from syllabug.extraction.invoker import ModelInvoker
from syllabug.extraction.models import ExtractionResult
from syllabug.extraction.normalizer import normalize_response
from syllabug.extraction.prompts import MAX_PROMPT_CHARS, prepare_request, render_prompt
from syllabug.extraction.validation import audit_records

logger = logging.getLogger(__name__)


async def extract_assignments(
    text: str,
    invoker: ModelInvoker | None,
    max_chars: int = MAX_PROMPT_CHARS,
) -> ExtractionResult:
    """Extract assignment records from syllabus text.

    Model unavailability never surfaces as an error: a missing invoker,
    failed model calls, and unparseable output all yield an empty result.

    Args:
        text: Plain syllabus text.
        invoker: Configured model invoker, or ``None`` if no API key is set.
        max_chars: Character ceiling for the document excerpt in the prompt.

    Returns:
        The extracted records (possibly empty).
    """
    logger.info("Starting assignment extraction with text length %d", len(text))
    request = prepare_request(text, max_chars)
    if request.truncated:
        logger.warning("Syllabus text truncated to %d characters", max_chars)

    if invoker is None:
        logger.error("No model invoker configured; returning empty result")
        return ExtractionResult.empty()

    raw = await invoker.invoke(render_prompt(request))
    if raw is None:
        return ExtractionResult.empty()

    result = normalize_response(raw)
    for issue in audit_records(result.items):
        logger.warning("Record %d field %s: %s", issue.index, issue.field, issue.problem)

    logger.info("Extracted %d assignments", len(result))
    return result
