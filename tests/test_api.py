"""Tests for API endpoints (no external API keys required)."""

from __future__ import annotations

import asyncio
import io
import json
from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import docx
import pytest
from fastapi.testclient import TestClient

from syllabug.api.dependencies import get_invoker, settings_dependency
from syllabug.api.main import app
from syllabug.config import Settings
from syllabug.ingestion.documents import DOCX_MIME

client = TestClient(app)
client_no_raise = TestClient(app, raise_server_exceptions=False)

InstallInvoker = Callable[..., None]

QUIZ = {
    "title": "Quiz 2",
    "type": "quiz",
    "due_date": "2025-02-15",
    "description": "Covers chapters 4-6.",
}


def _fake_invoker(returns: str | None = None, delay: float = 0.0) -> MagicMock:
    async def invoke(prompt: str) -> str | None:
        await asyncio.sleep(delay)
        return returns

    invoker = MagicMock()
    invoker.invoke = AsyncMock(side_effect=invoke)
    return invoker


@pytest.fixture
def use_invoker() -> Iterator[InstallInvoker]:
    """Install a fake model invoker for the duration of a test."""

    def install(invoker: MagicMock | None, **settings_overrides: object) -> None:
        app.dependency_overrides[get_invoker] = lambda: invoker
        if settings_overrides:
            cfg = Settings(_env_file=None, **settings_overrides)  # type: ignore[arg-type]
            app.dependency_overrides[settings_dependency] = lambda: cfg

    yield install
    app.dependency_overrides.clear()


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()


# ---------------------------------------------------------------------------
# /parse-assignments
# ---------------------------------------------------------------------------


class TestParseAssignments:
    def test_quiz_example_returns_200(self, use_invoker: InstallInvoker) -> None:
        use_invoker(_fake_invoker(json.dumps({"items": [QUIZ]})))
        response = client.post(
            "/parse-assignments", json={"text": "Quiz 2 due Feb 15, covers ch 4-6"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "message": "Assignment extraction successful",
            "assignments": {"items": [QUIZ]},
        }

    def test_non_json_model_output_returns_info_row(self, use_invoker: InstallInvoker) -> None:
        use_invoker(_fake_invoker("I cannot process this."))
        response = client.post("/parse-assignments", json={"text": "Office hours: Tuesdays"})
        assert response.status_code == 200
        items = response.json()["assignments"]["items"]
        assert len(items) == 1
        assert items[0]["type"] == "info"
        assert items[0]["title"] == "No assignments found"

    def test_model_unavailable_degrades_to_info_row(self, use_invoker: InstallInvoker) -> None:
        use_invoker(None)  # no API key configured
        response = client.post("/parse-assignments", json={"text": "Quiz 1 on Monday"})
        assert response.status_code == 200
        assert response.json()["assignments"]["items"][0]["title"] == "No assignments found"

    def test_slow_extraction_returns_single_202(self, use_invoker: InstallInvoker) -> None:
        invoker = _fake_invoker(json.dumps({"items": [QUIZ]}), delay=0.3)
        use_invoker(invoker, early_ack_seconds=0.05)
        with TestClient(app) as live_client:
            response = live_client.post("/parse-assignments", json={"text": "Quiz 2"})
        assert response.status_code == 202
        body = response.json()
        assert body["assignments"]["processing"] is True
        assert body["assignments"]["items"][0]["title"] == "Processing Assignment Data"
        invoker.invoke.assert_called_once()

    def test_pipeline_error_returns_500_with_hint(self, use_invoker: InstallInvoker) -> None:
        use_invoker(_fake_invoker())
        with patch(
            "syllabug.api.routes.assignments.extract_assignments",
            AsyncMock(side_effect=RuntimeError("extraction subsystem crashed")),
        ):
            response = client.post("/parse-assignments", json={"text": "Quiz 2"})
        assert response.status_code == 500
        assert response.json()["error"] == "extraction subsystem crashed"
        assert "hint" in response.json()

    @pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "   "}, {"text": 42}])
    def test_invalid_text_returns_400(
        self, body: dict[str, object], use_invoker: InstallInvoker
    ) -> None:
        invoker = _fake_invoker('{"items": []}')
        use_invoker(invoker)
        response = client.post("/parse-assignments", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Valid syllabus text is required"}
        invoker.invoke.assert_not_called()

    def test_extra_fields_are_ignored(self, use_invoker: InstallInvoker) -> None:
        use_invoker(_fake_invoker(json.dumps([QUIZ])))
        response = client.post(
            "/parse-assignments?t=12345", json={"text": "Quiz 2", "timestamp": 12345}
        )
        assert response.status_code == 200
        assert response.json()["assignments"]["items"] == [QUIZ]


# ---------------------------------------------------------------------------
# /extract-text
# ---------------------------------------------------------------------------


def _docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestExtractText:
    def test_docx_upload(self) -> None:
        raw = _docx_bytes("Midterm exam March 3", "Paper 1 due April 2")
        response = client.post(
            "/extract-text", files={"syllabus": ("syllabus.docx", raw, DOCX_MIME)}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Text extraction successful"
        assert body["filename"] == "syllabus.docx"
        assert body["mimeType"] == DOCX_MIME
        assert "Paper 1 due April 2" in body["text"]

    def test_missing_file_returns_400(self) -> None:
        response = client.post("/extract-text")
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    def test_unsupported_type_returns_400(self) -> None:
        response = client.post(
            "/extract-text", files={"syllabus": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400
        assert "PDF and DOCX" in response.json()["error"]

    def test_corrupt_pdf_returns_500(self) -> None:
        response = client.post(
            "/extract-text",
            files={"syllabus": ("broken.pdf", b"not a pdf", "application/pdf")},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to extract text from PDF"}

    def test_oversized_file_returns_413(self, use_invoker: InstallInvoker) -> None:
        use_invoker(None, max_file_size_mb=0)
        response = client.post(
            "/extract-text",
            files={"syllabus": ("big.pdf", b"%PDF-1.4 ...", "application/pdf")},
        )
        assert response.status_code == 413
        assert "too large" in response.json()["error"]


# ---------------------------------------------------------------------------
# /export-csv
# ---------------------------------------------------------------------------


class TestExportCsv:
    def test_returns_csv_attachment(self) -> None:
        response = client.post("/export-csv", json={"items": [QUIZ], "filename": "cs101.csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="cs101.csv"' in response.headers["content-disposition"]
        assert '"Quiz 2","quiz","2025-02-15","","Covers chapters 4-6."' in response.text

    def test_empty_items_returns_400(self) -> None:
        response = client.post("/export-csv", json={"items": []})
        assert response.status_code == 400
        assert response.json() == {"error": "No data to export"}


def test_api_prefixed_route_is_404() -> None:
    response = client_no_raise.post("/api/extract-text")
    assert response.status_code == 404
