"""Non-destructive checks on extracted records.

Records are never modified or dropped here; issues are reported so the
pipeline can log them. Callers still receive exactly what the model sent.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from syllabug.extraction.models import DATED_RANGE_TYPES, AssignmentType

KNOWN_TYPES = frozenset(t.value for t in AssignmentType)


@dataclass(frozen=True)
class RecordIssue:
    index: int
    field: str
    problem: str


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    # fromisoformat also accepts compact forms like 20250215 on newer Pythons
    return len(value) == 10


def audit_record(index: int, record: Any) -> list[RecordIssue]:
    if not isinstance(record, Mapping):
        return [RecordIssue(index, "*", f"expected an object, got {type(record).__name__}")]

    issues: list[RecordIssue] = []
    title = record.get("title")
    if not isinstance(title, str) or not title.strip():
        issues.append(RecordIssue(index, "title", "missing or empty"))

    kind = record.get("type")
    if kind not in KNOWN_TYPES:
        issues.append(RecordIssue(index, "type", f"unknown type {kind!r}"))

    for field_name in ("due_date", "start_date"):
        value = record.get(field_name)
        if value is not None and not _is_iso_date(value):
            issues.append(RecordIssue(index, field_name, f"not a YYYY-MM-DD date: {value!r}"))

    if record.get("start_date") is not None and kind not in DATED_RANGE_TYPES:
        issues.append(RecordIssue(index, "start_date", f"unexpected for type {kind!r}"))

    return issues


def audit_records(items: Sequence[Any]) -> list[RecordIssue]:
    """Collect issues for every record in ``items``."""
    issues: list[RecordIssue] = []
    for index, record in enumerate(items):
        issues.extend(audit_record(index, record))
    return issues
