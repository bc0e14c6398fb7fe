"""Minimal per-row identity check for imported trainees."""
from __future__ import annotations

from ...core.exceptions import RowValidationError
from ...schemas.trainee import TraineeRecord
from .fields import NAME_FIELDS

MISSING_NAME_REASON = "missing name information"


def validate_record(record: TraineeRecord, row: int) -> None:
    """Raise ``RowValidationError`` unless the record carries some name.

    At least one of ``name``, ``first_name`` or ``last_name`` must hold a
    non-blank value.  Uniqueness is left to persistence.
    """
    for key in NAME_FIELDS:
        value = getattr(record, key.value)
        if value and value.strip():
            return
    raise RowValidationError(row=row, reason=MISSING_NAME_REASON)
