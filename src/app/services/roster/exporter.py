"""
Roster CSV export.

Records are written in the fixed ``EXPORT_COLUMNS`` order under their
human-readable labels.  Every label is also a header-dictionary entry, so an
exported file re-imports cleanly (identity and age columns are ignored on the
way back in).
"""
from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from typing import Any

from .fields import EXPORT_COLUMNS, EXPORT_HEADERS


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def serialize_rows(records: Iterable[Any]) -> list[dict[str, str]]:
    """Flatten records (ORM rows or schemas) into label -> text dicts.

    Absent or ``None`` slots become empty strings.
    """
    return [
        {label: _cell(getattr(record, key.value, None)) for label, key in EXPORT_COLUMNS}
        for record in records
    ]


def render_csv(records: Iterable[Any]) -> str:
    """Render *records* as CSV text with a header line."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(EXPORT_HEADERS), lineterminator="\n")
    writer.writeheader()
    writer.writerows(serialize_rows(records))
    return buffer.getvalue()


def export_filename(today: date, prefix: str = "trainees-export") -> str:
    """``<prefix>-YYYY-MM-DD.csv`` for the given day."""
    return f"{prefix}-{today.isoformat()}.csv"
