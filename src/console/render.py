from __future__ import annotations

from typing import List, Mapping, Sequence

from state.models import StudentRecord


EMPTY_MESSAGE = "No students registered yet."

_HEADERS = ("#", "Name", "Student ID", "Email", "Contact")

# Display labels for error lines, keyed by serialized field name
FIELD_LABELS = {
    "name": "Name",
    "studentId": "Student ID",
    "email": "Email",
    "contact": "Contact",
}


def _row(record: StudentRecord, position: int) -> List[str]:
    return [str(position), record.name, record.student_id, record.email, record.contact]


def format_records_table(records: Sequence[StudentRecord]) -> str:
    """Return a plain-text table of records, numbered from 1.

    An empty sequence renders as a single placeholder line.
    """
    if not records:
        return EMPTY_MESSAGE

    rows = [list(_HEADERS)] + [_row(r, i + 1) for i, r in enumerate(records)]
    widths = [max(len(row[col]) for row in rows) for col in range(len(_HEADERS))]

    def fmt(row: List[str]) -> str:
        return "  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip()

    rule = "  ".join("-" * w for w in widths)
    return "\n".join([fmt(rows[0]), rule, *(fmt(r) for r in rows[1:])])


def format_errors(errors: Mapping[str, str]) -> str:
    return "\n".join(f"{FIELD_LABELS.get(k, k)}: {msg}" for k, msg in errors.items())


__all__ = [
    "EMPTY_MESSAGE",
    "FIELD_LABELS",
    "format_errors",
    "format_records_table",
]
