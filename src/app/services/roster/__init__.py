"""Bulk roster CSV import and export."""
from .column_mapper import map_columns, normalize_header, unmapped_headers
from .exporter import export_filename, render_csv, serialize_rows
from .fields import (
    EXPORT_COLUMNS,
    EXPORT_HEADERS,
    HEADER_DICTIONARY,
    HEADER_DICTIONARY_VERSION,
    TEMPLATE_HEADERS,
    CanonicalFieldKey,
)
from .importer import RosterFile, RosterImporter, TraineeWriter, read_roster_csv

__all__ = [
    "CanonicalFieldKey",
    "EXPORT_COLUMNS",
    "EXPORT_HEADERS",
    "HEADER_DICTIONARY",
    "HEADER_DICTIONARY_VERSION",
    "RosterFile",
    "RosterImporter",
    "TEMPLATE_HEADERS",
    "TraineeWriter",
    "export_filename",
    "map_columns",
    "normalize_header",
    "read_roster_csv",
    "render_csv",
    "serialize_rows",
    "unmapped_headers",
]
