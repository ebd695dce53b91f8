"""Data models for assignment extraction results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict


class AssignmentType(str, Enum):
    """Kinds of student-facing deliverables the model is asked to label."""

    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    EXAM = "exam"
    PAPER = "paper"
    PROJECT = "project"
    INFO = "info"  # synthetic rows produced by the server, never by the syllabus


# Types for which a start_date is meaningful
DATED_RANGE_TYPES = frozenset({AssignmentType.PAPER.value, AssignmentType.PROJECT.value})


class AssignmentRecord(TypedDict, total=False):
    """A single extracted deliverable.

    Records are kept as plain mappings so model output passes through
    unchanged, unknown keys included.
    """

    title: str
    type: str
    description: str | None
    due_date: str | None  # YYYY-MM-DD
    start_date: str | None  # YYYY-MM-DD, paper/project only


@dataclass
class ExtractionResult:
    """Ordered list of extracted records. ``items`` is always a list."""

    items: list[Any] = field(default_factory=list)

    @classmethod
    def empty(cls) -> ExtractionResult:
        return cls(items=[])

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {"items": list(self.items)}


@dataclass(frozen=True)
class ExtractionRequest:
    """Prompt-ready document text, derived once per extraction call."""

    raw_text: str
    truncated: bool = False
