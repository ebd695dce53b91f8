"""Pydantic request/response schemas for the Syllabug API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ExtractTextResponse(BaseModel):
    """Response body for the /extract-text endpoint."""

    message: str
    filename: str | None = None
    mimeType: str
    text: str


class ParseAssignmentsRequest(BaseModel):
    """Request body for the /parse-assignments endpoint.

    ``text`` is typed loosely so a missing or non-string value can be
    reported as a 400 rather than a schema validation error.
    """

    model_config = ConfigDict(extra="ignore")

    text: Any = None


class ExportCsvRequest(BaseModel):
    """Request body for the /export-csv endpoint."""

    items: list[dict[str, Any]] = []
    filename: str = "assignments.csv"


class HealthResponse(BaseModel):
    status: str
    version: str
