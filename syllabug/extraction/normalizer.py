"""Recover a list of assignment records from free-form model output.

Models are asked for ``{"items": [...]}`` but do not always comply. Each rung
of the recovery ladder below is a pure function that either returns the
record list or ``None``; rungs are tried in order and the first hit wins.
Records themselves are returned untouched.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from syllabug.extraction.models import ExtractionResult

logger = logging.getLogger(__name__)

# ```json ... ``` or ``` ... ```, on one line or several
FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

# How much of an unparseable response to include in the warning
PREVIEW_CHARS = 200


def _from_items_field(parsed: Any) -> list[Any] | None:
    if isinstance(parsed, dict) and isinstance(parsed.get("items"), list):
        return parsed["items"]
    return None


def _from_bare_array(parsed: Any) -> list[Any] | None:
    if isinstance(parsed, list):
        return parsed
    return None


def _from_record_field(parsed: Any) -> list[Any] | None:
    """First list-valued field whose first element looks like a record."""
    if not isinstance(parsed, dict):
        return None
    for key, value in parsed.items():
        if isinstance(value, list) and value and isinstance(value[0], dict) and "title" in value[0]:
            logger.info("Using records from field %r instead of 'items'", key)
            return value
    return None


STRUCTURE_RUNGS: list[Callable[[Any], list[Any] | None]] = [
    _from_items_field,
    _from_bare_array,
    _from_record_field,
]


def _from_structure(parsed: Any) -> list[Any] | None:
    for rung in STRUCTURE_RUNGS:
        items = rung(parsed)
        if items is not None:
            return items
    return None


def _from_fenced_block(text: str) -> list[Any] | None:
    """Apply the structural rungs to each fenced code block in turn."""
    for match in FENCED_BLOCK_RE.finditer(text):
        try:
            parsed = json.loads(match.group(1))
        except (ValueError, RecursionError) as exc:
            logger.warning("Fenced block is not valid JSON: %s", exc)
            continue
        items = _from_structure(parsed)
        if items is not None:
            return items
    return None


def recover_items(raw: str | None) -> list[Any] | None:
    """Return the record list, or ``None`` if no rung matched."""
    if not raw or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # RecursionError: pathologically nested output, e.g. a looping model cut off mid-array
        logger.info("Direct JSON parse failed (%s), looking for a fenced block", exc)
        return _from_fenced_block(raw)
    return _from_structure(parsed)


def normalize_response(raw: str | None) -> ExtractionResult:
    """Turn raw model output into an ExtractionResult. Never raises.

    An explicit ``{"items": []}`` and an unparseable response both yield an
    empty result; they are only told apart in the logs.
    """
    items = recover_items(raw)
    if items is None:
        preview = (raw or "")[:PREVIEW_CHARS]
        logger.warning("Could not recover assignments from model output: %r", preview)
        return ExtractionResult.empty()
    if not items:
        logger.info("Model reported no assignments in this document")
    return ExtractionResult(items=items)
