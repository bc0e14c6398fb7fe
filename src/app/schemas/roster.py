"""
Roster Import / Export Schemas.

The import report is built fresh for each upload, returned to the caller and
never stored.
"""
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class ImportOutcomeStatus(str, Enum):
    """Result of processing one data row."""
    CREATED = "created"
    REJECTED = "rejected"


class ImportOutcome(BaseModel):
    """Per-row outcome of a roster import.

    ``row`` is the 1-based data row number; the header line is not counted.
    """

    row: int = Field(ge=1)
    status: ImportOutcomeStatus
    trainee_id: str | None = None
    reason: str | None = None
    is_duplicate_identity: bool = False

    @classmethod
    def created(cls, row: int, trainee_id: str) -> "ImportOutcome":
        return cls(row=row, status=ImportOutcomeStatus.CREATED, trainee_id=trainee_id)

    @classmethod
    def rejected(cls, row: int, reason: str, is_duplicate_identity: bool = False) -> "ImportOutcome":
        return cls(
            row=row,
            status=ImportOutcomeStatus.REJECTED,
            reason=reason,
            is_duplicate_identity=is_duplicate_identity,
        )


class ImportReport(BaseModel):
    """Aggregate result of one roster import, outcomes in file order."""

    total_rows: int = 0
    created: int = 0
    rejected: int = 0
    duplicates: int = 0
    outcomes: list[ImportOutcome] = Field(default_factory=list)
    unmapped_headers: list[str] = Field(
        default_factory=list,
        description="File columns that matched no known field and were ignored",
    )
    header_dictionary_version: int

    def add(self, outcome: ImportOutcome) -> None:
        """Append an outcome and keep the totals in step."""
        self.outcomes.append(outcome)
        self.total_rows += 1
        if outcome.status is ImportOutcomeStatus.CREATED:
            self.created += 1
        else:
            self.rejected += 1
            if outcome.is_duplicate_identity:
                self.duplicates += 1

    @computed_field
    @property
    def success(self) -> bool:
        return self.rejected == 0


class ImportPreview(BaseModel):
    """Dry-run view of how a file's header line will be read."""

    column_mapping: dict[str, str]
    unmapped_headers: list[str]
    data_rows: int
    header_dictionary_version: int
