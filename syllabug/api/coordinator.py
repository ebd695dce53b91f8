"""Per-request coordination of assignment extraction with early acknowledgment.

If extraction takes longer than ``ack_after_seconds`` the caller gets a 202
with a placeholder row so the client does not time out. The extraction keeps
running, but its result can only be logged: the single reply for the request
has already been sent and there is no push channel.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from syllabug.extraction.models import AssignmentRecord, AssignmentType, ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_ACK_AFTER_SECONDS = 10.0

API_KEY_HINT = "Make sure your model API key is valid in the .env file"

# Tasks still running after a 202; held here so the event loop does not drop them.
_background_tasks: set[asyncio.Task[ExtractionResult]] = set()


class CoordinatorState(str, Enum):
    RECEIVED = "received"
    EXTRACTING = "extracting"
    EARLY_ACK = "early_ack"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class CoordinatorReply:
    status_code: int
    body: dict[str, Any]


class ResponseGuard:
    """One-shot flag: a request may be answered exactly once."""

    def __init__(self) -> None:
        self._claimed = False

    @property
    def claimed(self) -> bool:
        return self._claimed

    def claim(self) -> bool:
        """Return True the first time only."""
        if self._claimed:
            return False
        self._claimed = True
        return True


def processing_record(today: date) -> AssignmentRecord:
    return {
        "title": "Processing Assignment Data",
        "type": AssignmentType.INFO.value,
        "due_date": today.isoformat(),
        "description": (
            "Your syllabus is still being processed. "
            "This may take up to 1-2 minutes for large files."
        ),
    }


def no_assignments_record(today: date) -> AssignmentRecord:
    return {
        "title": "No assignments found",
        "type": AssignmentType.INFO.value,
        "due_date": today.isoformat(),
        "description": (
            "No assignments with due dates were found in this syllabus. Try uploading "
            "a different syllabus file or check the text content of your document."
        ),
    }


class ExtractionCoordinator:
    """Runs one extraction and decides the single HTTP reply for it.

    Args:
        extract: Zero-argument coroutine factory running the extraction pipeline.
        ack_after_seconds: Delay after which a 202 placeholder is sent.
        request_id: Identifier used to prefix log lines.
        today: Date provider for the synthetic rows.
    """

    def __init__(
        self,
        extract: Callable[[], Awaitable[ExtractionResult]],
        ack_after_seconds: float = DEFAULT_ACK_AFTER_SECONDS,
        request_id: str = "-",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.extract = extract
        self.ack_after_seconds = ack_after_seconds
        self.request_id = request_id
        self.today = today
        self.state = CoordinatorState.RECEIVED
        self.guard = ResponseGuard()

    async def _run_extraction(self) -> ExtractionResult:
        return await self.extract()

    async def run(self) -> CoordinatorReply:
        self.state = CoordinatorState.EXTRACTING
        task = asyncio.create_task(self._run_extraction())
        try:
            done, _ = await asyncio.wait({task}, timeout=self.ack_after_seconds)
        except asyncio.CancelledError:
            # Client went away before any reply; nobody is left to read the result.
            task.cancel()
            raise

        if task in done:
            return self._reply_with(task)

        self.guard.claim()
        self.state = CoordinatorState.EARLY_ACK
        logger.info(
            "[%s] Extraction taking longer than %.0fs, sending 202 Accepted",
            self.request_id,
            self.ack_after_seconds,
        )
        _background_tasks.add(task)
        task.add_done_callback(self._log_late_outcome)
        return CoordinatorReply(
            status_code=202,
            body={
                "message": "Assignment extraction in progress",
                "assignments": {
                    "processing": True,
                    "items": [processing_record(self.today())],
                },
            },
        )

    def _reply_with(self, task: asyncio.Task[ExtractionResult]) -> CoordinatorReply:
        exc = task.exception()
        if not self.guard.claim():
            raise RuntimeError(f"[{self.request_id}] reply already sent")

        if exc is not None:
            self.state = CoordinatorState.FAILED
            logger.error(
                "[%s] Assignment extraction failed: %s", self.request_id, exc, exc_info=exc
            )
            return CoordinatorReply(
                status_code=500,
                body={"error": str(exc) or "Assignment extraction failed", "hint": API_KEY_HINT},
            )

        result = task.result()
        self.state = CoordinatorState.COMPLETED
        logger.info(
            "[%s] Assignment extraction complete. Found %d assignments",
            self.request_id,
            len(result),
        )
        if len(result) == 0:
            return CoordinatorReply(
                status_code=200,
                body={
                    "message": "No assignments found in syllabus",
                    "assignments": {"items": [no_assignments_record(self.today())]},
                },
            )
        return CoordinatorReply(
            status_code=200,
            body={"message": "Assignment extraction successful", "assignments": result.to_dict()},
        )

    def _log_late_outcome(self, task: asyncio.Task[ExtractionResult]) -> None:
        _background_tasks.discard(task)
        if task.cancelled():
            self.state = CoordinatorState.FAILED
            logger.warning("[%s] Extraction cancelled after 202 response", self.request_id)
            return
        exc = task.exception()
        if exc is not None:
            self.state = CoordinatorState.FAILED
            logger.error(
                "[%s] Extraction failed after 202 response: %s", self.request_id, exc, exc_info=exc
            )
            return
        self.state = CoordinatorState.COMPLETED
        logger.info(
            "[%s] Assignment processing completed after 202 response was sent (%d assignments)",
            self.request_id,
            len(task.result()),
        )
