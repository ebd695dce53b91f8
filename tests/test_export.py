"""Tests for CSV rendering of assignments."""

from __future__ import annotations

import csv
import io

from syllabug.export.csv_export import CSV_HEADERS, assignments_to_csv


class TestAssignmentsToCsv:
    def test_header_and_rows(self) -> None:
        output = assignments_to_csv(
            [
                {
                    "title": "Final Project",
                    "type": "project",
                    "start_date": "2025-03-10",
                    "due_date": "2025-04-01",
                    "description": "Team presentation",
                },
                {"title": "Quiz 2", "type": "quiz", "due_date": "2025-02-15"},
            ]
        )
        lines = output.splitlines()
        assert lines[0] == '"Title","Type","Due Date","Start Date","Description"'
        assert lines[1] == (
            '"Final Project","project","2025-04-01","2025-03-10","Team presentation"'
        )
        assert lines[2] == '"Quiz 2","quiz","2025-02-15","",""'

    def test_commas_and_quotes_are_escaped(self) -> None:
        output = assignments_to_csv(
            [{"title": 'Essay "Why, and how"', "type": "paper", "description": None}]
        )
        assert '"Essay ""Why, and how"""' in output
        rows = list(csv.reader(io.StringIO(output)))
        assert rows[0] == CSV_HEADERS
        assert rows[1][0] == 'Essay "Why, and how"'

    def test_empty_input_has_only_header(self) -> None:
        assert assignments_to_csv([]).splitlines() == [",".join(f'"{h}"' for h in CSV_HEADERS)]
