"""CSV rendering of extracted assignments for spreadsheet/calendar import."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Mapping
from typing import Any

CSV_HEADERS = ["Title", "Type", "Due Date", "Start Date", "Description"]
CSV_FIELDS = ["title", "type", "due_date", "start_date", "description"]


def _cell(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def assignments_to_csv(items: Iterable[Mapping[str, Any]]) -> str:
    """Render records as CSV with every field quoted.

    Missing or null fields become empty strings; embedded quotes are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in items:
        writer.writerow([_cell(record, key) for key in CSV_FIELDS])
    return buffer.getvalue()
