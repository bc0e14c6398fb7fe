"""
Trainee Roster Endpoints.

Exposed routes (all under /api/v1/trainees):
  GET    /                  - Paginated trainee list; ?status= and ?search= filters
  GET    /import/template   - Blank CSV with every importable column header
  POST   /import/preview    - Show how the file's headers will be read, no DB writes
  POST   /import            - Import every data row; partial success is reported per row
  GET    /export            - Download the roster as CSV (re-importable)
  GET    /{trainee_id}      - Fetch one trainee
  PUT    /{trainee_id}      - Edit a trainee; a new date_of_birth recomputes age

Static paths are registered before ``/{trainee_id}`` so they are not captured
as ids.
"""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from ....core.config import Settings, get_settings
from ....core.exceptions import FileValidationError, PayloadTooLargeError
from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....core.security import CurrentActor
from ....db.session import DbSession
from ....models.enums import TraineeStatus
from ....repositories.trainee_repository import TraineeRepository
from ....schemas.roster import ImportPreview, ImportReport
from ....schemas.trainee import TraineeResponse, TraineeUpdate
from ....services.roster import (
    HEADER_DICTIONARY_VERSION,
    TEMPLATE_HEADERS,
    RosterFile,
    RosterImporter,
    export_filename,
    map_columns,
    read_roster_csv,
    render_csv,
    unmapped_headers,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/trainees")

SettingsDep = Annotated[Settings, Depends(get_settings)]

_ACCEPTED_CONTENT_TYPES = ("text/csv", "application/csv", "application/octet-stream", "text/plain")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _get_trainee_repo(db: DbSession) -> TraineeRepository:
    """DI factory: returns a TraineeRepository bound to the request session."""
    return TraineeRepository(db)


TraineeRepoDep = Annotated[TraineeRepository, Depends(_get_trainee_repo)]


def _csv_download(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _read_roster_upload(file: UploadFile, settings: Settings) -> RosterFile:
    """Read, size-check and decode an uploaded roster, then split it into rows.

    Raises:
        FileValidationError: not a CSV, or not valid UTF-8
        PayloadTooLargeError: over the byte limit or the row limit
        ImportAbortedError: empty file or no header line
    """
    filename = file.filename or ""
    # Browsers often send application/octet-stream for .csv files, so only
    # fall back to the extension when the MIME type is unexpected.
    if file.content_type not in _ACCEPTED_CONTENT_TYPES and not filename.lower().endswith(".csv"):
        raise FileValidationError(
            "Only CSV files are accepted (.csv extension required).",
            filename=filename or None,
            allowed_types=list(_ACCEPTED_CONTENT_TYPES),
        )

    raw_bytes = await file.read()
    if len(raw_bytes) > settings.max_file_size_bytes:
        raise PayloadTooLargeError(
            f"Roster file exceeds {settings.MAX_FILE_SIZE_MB} MB.",
            details={"size_bytes": len(raw_bytes)},
        )

    try:
        # utf-8-sig strips the BOM Excel adds to exported CSVs.
        text = raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FileValidationError(
            "File must be UTF-8 encoded.",
            filename=filename or None,
        ) from exc

    roster = read_roster_csv(text)
    if len(roster.rows) > settings.ROSTER_IMPORT_MAX_ROWS:
        raise PayloadTooLargeError(
            f"Roster has {len(roster.rows)} data rows; the limit is "
            f"{settings.ROSTER_IMPORT_MAX_ROWS} per upload.",
            details={"data_rows": len(roster.rows)},
        )
    return roster


# ---------------------------------------------------------------------------
# GET /trainees  (paginated list)
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=PaginatedResponse[TraineeResponse],
    summary="List trainees",
    description="Paginated roster, newest first.",
)
async def list_trainees(
    repo: TraineeRepoDep,
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(default=20, ge=1, le=100, description="Items per page"),
    status_filter: TraineeStatus | None = Query(default=None, alias="status", description="Filter by lifecycle status"),
    search: str | None = Query(default=None, description="Partial match on name, email or unique id"),
) -> PaginatedResponse[TraineeResponse]:
    skip = (page - 1) * page_size
    trainees = await repo.get_all(skip=skip, limit=page_size, status=status_filter, search=search)
    total = await repo.count(status=status_filter, search=search)

    return PaginatedResponse(
        message=f"Retrieved {len(trainees)} trainees",
        data=[TraineeResponse.model_validate(t) for t in trainees],
        pagination=PaginationMeta.from_total(total=total, page=page, page_size=page_size),
    )


# ---------------------------------------------------------------------------
# GET /trainees/import/template
# ---------------------------------------------------------------------------

@router.get(
    "/import/template",
    summary="Download roster import template",
    description=(
        "A header-only CSV listing every column the importer understands. "
        "Identity columns and age are left out; they are never read from files."
    ),
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "CSV template file"}},
)
async def download_import_template() -> Response:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(TEMPLATE_HEADERS)
    return _csv_download(buffer.getvalue(), "trainee_import_template.csv")


# ---------------------------------------------------------------------------
# POST /trainees/import/preview
#   Dry run.  Reports which columns will be read into which fields and which
#   will be ignored, so a mis-labelled file can be fixed before importing.
# ---------------------------------------------------------------------------

@router.post(
    "/import/preview",
    response_model=GenericResponse[ImportPreview],
    summary="Preview how a roster file's columns will be read",
    responses={
        400: {"description": "Not a CSV, not UTF-8, or no header row"},
        413: {"description": "File or row count over the limit"},
    },
)
async def preview_roster_import(
    settings: SettingsDep,
    file: UploadFile = File(..., description="Roster CSV (UTF-8)"),
) -> GenericResponse[ImportPreview]:
    roster = await _read_roster_upload(file, settings)
    mapping = map_columns(roster.headers)
    preview = ImportPreview(
        column_mapping={header: key.value for header, key in mapping.items()},
        unmapped_headers=unmapped_headers(roster.headers, mapping),
        data_rows=len(roster.rows),
        header_dictionary_version=HEADER_DICTIONARY_VERSION,
    )
    return GenericResponse(message="Roster preview generated", data=preview)


# ---------------------------------------------------------------------------
# POST /trainees/import
#   Rows are written one at a time, each in its own commit.  A row that fails
#   validation or hits a uniqueness conflict is reported and skipped; the
#   rest of the file still imports.
# ---------------------------------------------------------------------------

@router.post(
    "/import",
    response_model=ImportReport,
    status_code=status.HTTP_200_OK,
    summary="Import trainees from a roster CSV",
    description="""
Upload a roster CSV.  Column headers are matched case-insensitively against the
known field names and their common spellings; unknown columns are ignored and
listed in ``unmapped_headers``.

Per row:
- empty cells are skipped, never written as blanks
- ``Internal ID``, ``Unique ID`` and ``Age`` columns are ignored; age is derived
  from the date of birth
- rows without any name are rejected
- rows whose SSN already exists are rejected and counted in ``duplicates``

``success`` is true only when every row was created.
    """,
    responses={
        200: {"description": "Import finished; inspect ``outcomes`` per row"},
        400: {"description": "Not a CSV, not UTF-8, or no header row"},
        401: {"description": "No acting user on the access token"},
        413: {"description": "File or row count over the limit"},
    },
)
async def import_roster(
    repo: TraineeRepoDep,
    actor_id: CurrentActor,
    settings: SettingsDep,
    file: UploadFile = File(..., description="Roster CSV (UTF-8)"),
) -> ImportReport:
    roster = await _read_roster_upload(file, settings)
    importer = RosterImporter(
        repo,
        default_status=TraineeStatus(settings.ROSTER_DEFAULT_STATUS),
    )
    report = await importer.import_rows(
        roster.headers, roster.rows, actor_id, row_numbers=roster.row_numbers
    )

    logger.info(
        "Roster CSV import complete",
        filename=file.filename or "unknown",
        total=report.total_rows,
        created=report.created,
        rejected=report.rejected,
        uploader_id=actor_id,
    )
    return report


# ---------------------------------------------------------------------------
# GET /trainees/export
# ---------------------------------------------------------------------------

@router.get(
    "/export",
    summary="Export the roster as CSV",
    description="Every trainee in a fixed column order. The file can be imported again as-is.",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "Roster CSV"}},
)
async def export_roster(
    repo: TraineeRepoDep,
    settings: SettingsDep,
    status_filter: TraineeStatus | None = Query(default=None, alias="status", description="Export only this status"),
    search: str | None = Query(default=None, max_length=100, description="Name, email or unique ID contains"),
) -> Response:
    trainees = await repo.list_for_export(status=status_filter, search=search)
    filename = export_filename(date.today(), settings.ROSTER_EXPORT_FILENAME_PREFIX)

    logger.info("Roster CSV export", rows=len(trainees), filename=filename)
    return _csv_download(render_csv(trainees), filename)


# ---------------------------------------------------------------------------
# GET/PUT /trainees/{trainee_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{trainee_id}",
    response_model=GenericResponse[TraineeResponse],
    summary="Get trainee by ID",
)
async def get_trainee(
    trainee_id: str,
    repo: TraineeRepoDep,
) -> GenericResponse[TraineeResponse]:
    trainee = await repo.get_by_id_or_raise(trainee_id)
    return GenericResponse(
        message="Trainee retrieved successfully",
        data=TraineeResponse.model_validate(trainee),
    )


@router.put(
    "/{trainee_id}",
    response_model=GenericResponse[TraineeResponse],
    summary="Update trainee",
    description=(
        "Partial update; only fields present in the body change. "
        "Setting date_of_birth recomputes age, and null clears both."
    ),
)
async def update_trainee(
    trainee_id: str,
    payload: TraineeUpdate,
    repo: TraineeRepoDep,
) -> GenericResponse[TraineeResponse]:
    trainee = await repo.update(trainee_id, payload)
    return GenericResponse(
        message="Trainee updated successfully",
        data=TraineeResponse.model_validate(trainee),
    )
