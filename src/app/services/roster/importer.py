"""
Roster Batch Importer.

Turns a CSV roster into trainee records, one row at a time:

    header line ──► map_columns (once)
    each data row ──► coerce cells ──► derive age ──► stamp defaults
                  ──► validate ──► await writer.create_trainee(...)
                  ──► ImportOutcome appended to the ImportReport

Rows are processed strictly in file order with one awaited write per
iteration.  Every per-row problem becomes a ``rejected`` outcome; only a
missing actor or an unreadable/headerless file aborts the whole call, and it
does so before any row is written.
"""
from __future__ import annotations

import csv
import io
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

import structlog
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import (
    AppException,
    ImportAbortedError,
    MissingActorError,
    RowValidationError,
)
from ...core.trainee_utils import derive_age
from ...models.enums import TraineeStatus
from ...schemas.roster import ImportOutcome, ImportReport
from ...schemas.trainee import TraineeRecord
from .coercion import coerce_field
from .column_mapper import ColumnMapping, map_columns, unmapped_headers
from .fields import (
    HEADER_DICTIONARY,
    HEADER_DICTIONARY_VERSION,
    IDENTITY_FIELDS,
    CanonicalFieldKey,
)
from .validation import validate_record

logger = structlog.get_logger(__name__)

# Substrings (lower-case) that mark a persistence error as a duplicate identity.
DUPLICATE_MARKERS: tuple[str, ...] = ("duplicate", "unique")

# Domain error messages are truncated before they go into the report.
_MAX_REASON_LENGTH = 200


class TraineeWriter(Protocol):
    """Persistence collaborator: store one record, return its new id or raise."""

    async def create_trainee(self, record: TraineeRecord, actor_id: str) -> str: ...


@dataclass(frozen=True)
class RosterFile:
    """A parsed CSV: the header line and the non-blank data rows.

    ``row_numbers[i]`` is the 1-based data-line position of ``rows[i]`` in
    the file, counting skipped blank lines, so outcomes point back to the
    line the user sees after the header.
    """

    headers: list[str]
    rows: list[list[str]]
    row_numbers: list[int]


def read_roster_csv(text: str) -> RosterFile:
    """Split CSV text into a header line and data rows.

    Blank lines (no cell with visible text) are skipped but still advance
    the data-line numbering.

    Raises:
        ImportAbortedError: the text cannot be parsed or has no header line.
    """
    try:
        records = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise ImportAbortedError(
            f"Roster file could not be read as CSV: {exc}",
        ) from exc

    non_blank = [(position, cells) for position, cells in enumerate(records) if _has_text(cells)]
    if not non_blank:
        raise ImportAbortedError("Roster file is empty or has no header row.")

    (header_position, headers), *data = non_blank
    return RosterFile(
        headers=headers,
        rows=[cells for _, cells in data],
        row_numbers=[position - header_position for position, _ in data],
    )


def _has_text(cells: Sequence[str]) -> bool:
    return any(cell.strip() for cell in cells)


def is_duplicate_identity_error(error_text: str) -> bool:
    """True when a persistence error message reports a uniqueness conflict."""
    lowered = error_text.lower()
    return any(marker in lowered for marker in DUPLICATE_MARKERS)


def _failure_reason(exc: Exception, duplicate: bool) -> str:
    """Report text for a failed write.

    Only application errors carry a message safe to show; raw driver errors
    can echo SQL and bound values, so they are reduced to a fixed phrase.
    """
    if isinstance(exc, AppException):
        return exc.message[:_MAX_REASON_LENGTH]
    if duplicate:
        return "duplicate identity"
    return f"record could not be saved ({type(exc).__name__})"


class RosterImporter:
    """Sequential, partial-failure roster import.

    Args:
        writer: persistence collaborator that creates one trainee per call.
        default_status: status stamped on rows without a valid ``status`` cell.
        dictionary: header dictionary; injectable for tests and future versions.
        clock: returns the reference date used to derive ages.
    """

    def __init__(
        self,
        writer: TraineeWriter,
        *,
        default_status: TraineeStatus = TraineeStatus.default(),
        dictionary: Mapping[str, CanonicalFieldKey] = HEADER_DICTIONARY,
        dictionary_version: int = HEADER_DICTIONARY_VERSION,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.writer = writer
        self.default_status = default_status
        self.dictionary = dictionary
        self.dictionary_version = dictionary_version
        self.clock = clock

    async def import_csv(self, text: str, actor_id: str | None) -> ImportReport:
        """Parse *text* and import every data row."""
        self._require_actor(actor_id)
        roster = read_roster_csv(text)
        return await self.import_rows(
            roster.headers, roster.rows, actor_id, row_numbers=roster.row_numbers
        )

    async def import_rows(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        actor_id: str | None,
        row_numbers: Sequence[int] | None = None,
    ) -> ImportReport:
        """Import already-split rows; *headers* is the file's first line.

        *row_numbers* gives each row's data-line position in the source file;
        without it rows are numbered 1..n in the order given.
        """
        actor = self._require_actor(actor_id)
        if not any(h and h.strip() for h in headers):
            raise ImportAbortedError("Roster file has no usable header row.")
        if row_numbers is not None and len(row_numbers) != len(rows):
            raise ValueError("row_numbers must have one entry per row")

        mapping = map_columns(headers, self.dictionary)
        report = ImportReport(
            unmapped_headers=unmapped_headers(headers, mapping),
            header_dictionary_version=self.dictionary_version,
        )
        today = self.clock()

        logger.info(
            "roster_import_started",
            data_rows=len(rows),
            mapped_columns=len(mapping),
            unmapped_columns=len(report.unmapped_headers),
            dictionary_version=self.dictionary_version,
            actor_id=actor,
        )

        for index in range(len(rows)):
            row_number = row_numbers[index] if row_numbers is not None else index + 1
            outcome = await self._import_row(row_number, headers, rows[index], mapping, actor, today)
            report.add(outcome)

        logger.info(
            "roster_import_finished",
            total=report.total_rows,
            created=report.created,
            rejected=report.rejected,
            duplicates=report.duplicates,
            actor_id=actor,
        )
        return report

    def build_record(
        self,
        headers: Sequence[str],
        cells: Sequence[str],
        mapping: ColumnMapping,
        actor_id: str,
        today: date,
    ) -> TraineeRecord:
        """Assemble the canonical record for one row.

        Cells are applied left to right, so when two headers map to the same
        field the later non-empty cell wins.  Identity fields are dropped and
        any supplied age is replaced by one derived from the birth date.
        """
        values: dict[str, Any] = {}
        for position, header in enumerate(headers):
            key = mapping.get(header)
            if key is None or key in IDENTITY_FIELDS:
                continue
            raw = cells[position] if position < len(cells) else None
            value = coerce_field(key, raw)
            if value is not None:
                values[key.value] = value

        values.pop(CanonicalFieldKey.AGE.value, None)
        birth_date = values.get(CanonicalFieldKey.DATE_OF_BIRTH.value)
        if birth_date is not None:
            values[CanonicalFieldKey.AGE.value] = derive_age(birth_date, today)

        values.setdefault(CanonicalFieldKey.STATUS.value, self.default_status)
        values["created_by"] = actor_id
        return TraineeRecord(**values)

    async def _import_row(
        self,
        row_number: int,
        headers: Sequence[str],
        cells: Sequence[str],
        mapping: ColumnMapping,
        actor_id: str,
        today: date,
    ) -> ImportOutcome:
        try:
            record = self.build_record(headers, cells, mapping, actor_id, today)
            validate_record(record, row_number)
        except RowValidationError as exc:
            logger.warning("roster_row_rejected", row=row_number, reason=exc.reason)
            return ImportOutcome.rejected(row_number, exc.reason)
        except PydanticValidationError as exc:
            reason = f"invalid field values: {exc.error_count()} error(s)"
            logger.warning("roster_row_rejected", row=row_number, reason=reason)
            return ImportOutcome.rejected(row_number, reason)

        try:
            trainee_id = await self.writer.create_trainee(record, actor_id)
        except Exception as exc:
            duplicate = is_duplicate_identity_error(str(exc))
            detail = _failure_reason(exc, duplicate)
            logger.warning(
                "roster_row_not_saved",
                row=row_number,
                error=type(exc).__name__,
                duplicate_identity=duplicate,
            )
            return ImportOutcome.rejected(row_number, detail, is_duplicate_identity=duplicate)

        return ImportOutcome.created(row_number, trainee_id)

    @staticmethod
    def _require_actor(actor_id: str | None) -> str:
        if actor_id is None or not str(actor_id).strip():
            raise MissingActorError("Roster import refused: no acting user id")
        return str(actor_id).strip()
