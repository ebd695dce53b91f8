"""CSV export of extracted assignments."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response

from syllabug.api.errors import APIError
from syllabug.api.models import ExportCsvRequest
from syllabug.export.csv_export import assignments_to_csv

router = APIRouter()


@router.post("/export-csv")
async def export_csv(body: ExportCsvRequest) -> Response:
    """Return the given assignments as a downloadable CSV file."""
    if not body.items:
        raise APIError(400, "No data to export")

    filename = body.filename.replace('"', "") or "assignments.csv"
    return Response(
        content=assignments_to_csv(body.items),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
