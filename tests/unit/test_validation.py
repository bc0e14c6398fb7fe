"""Unit tests for the per-row name check."""
from __future__ import annotations

import pytest

from src.app.core.exceptions import RowValidationError
from src.app.schemas.trainee import TraineeRecord
from src.app.services.roster.validation import MISSING_NAME_REASON, validate_record


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "Ada Lovelace"},
        {"first_name": "Ada"},
        {"last_name": "Lovelace"},
    ],
)
def test_any_name_part_is_enough(fields):
    validate_record(TraineeRecord(**fields), row=1)


def test_no_name_is_rejected_with_row_number():
    record = TraineeRecord(ssn="111-22-3333", middle_name="King")

    with pytest.raises(RowValidationError) as exc_info:
        validate_record(record, row=7)

    assert exc_info.value.row == 7
    assert exc_info.value.reason == MISSING_NAME_REASON


def test_blank_name_does_not_count():
    with pytest.raises(RowValidationError):
        validate_record(TraineeRecord(name="   "), row=1)
