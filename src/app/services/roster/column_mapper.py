"""Header-to-field reconciliation for roster files.

Pure functions: no I/O, no logging, same input always gives the same output.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from .fields import HEADER_DICTIONARY, CanonicalFieldKey

ColumnMapping = dict[str, CanonicalFieldKey]


def normalize_header(header: str) -> str:
    """Trim and lower-case a raw header label."""
    return header.strip().lower()


def map_columns(
    headers: Iterable[str],
    dictionary: Mapping[str, CanonicalFieldKey] = HEADER_DICTIONARY,
) -> ColumnMapping:
    """Map each original header to its canonical field.

    Headers without a dictionary entry are left out of the result.  Several
    headers may map to the same field; the importer applies them in file
    order, so the right-most column wins.
    """
    mapping: ColumnMapping = {}
    for header in headers:
        if header is None:
            continue
        key = dictionary.get(normalize_header(header))
        if key is not None:
            mapping[header] = key
    return mapping


def unmapped_headers(headers: Iterable[str], mapping: Mapping[str, CanonicalFieldKey]) -> list[str]:
    """Return the headers, in file order, that the mapping dropped."""
    return [h for h in headers if h is not None and h not in mapping]
