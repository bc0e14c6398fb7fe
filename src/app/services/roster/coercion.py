"""Per-field coercion of raw CSV cells into typed trainee values.

``coerce_field`` never raises.  A cell that cannot be read as its field's type
is dropped (returns ``None``) so a bad date costs one field, not the whole
person.
"""
from __future__ import annotations

import re
from datetime import date, datetime

import structlog
from dateutil import parser as dateparser
from dateutil.parser import ParserError

from ...models.enums import TraineeStatus
from .fields import DATE_FIELDS, CanonicalFieldKey

logger = structlog.get_logger(__name__)

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Fills date parts a generic parse leaves out ("1990" -> 1990-01-01), so the
# result never depends on the day the import runs.
_PARSE_DEFAULT = datetime(2000, 1, 1)

CoercedValue = str | int | date | TraineeStatus


def parse_date(raw: str) -> date | None:
    """Read a birth-date style cell.

    Tried in order: ISO ``YYYY-MM-DD``, US ``M/D/YYYY``, then a generic
    parse.  Only real calendar dates are returned; parts the generic parse
    cannot find default to January 1st.
    """
    text = raw.strip()
    if not text:
        return None

    match = _ISO_DATE_RE.match(text)
    if match:
        try:
            return date(int(match[1]), int(match[2]), int(match[3]))
        except ValueError:
            return None

    match = _US_DATE_RE.match(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return dateparser.parse(text, default=_PARSE_DEFAULT).date()
    except (ParserError, ValueError, OverflowError, TypeError):
        return None


def _parse_age(text: str) -> int | None:
    try:
        value = int(float(text))
    except (ValueError, OverflowError):
        return None
    return value if value >= 0 else None


def coerce_field(key: CanonicalFieldKey, raw: str | None) -> CoercedValue | None:
    """Convert *raw* into the typed value for *key*, or ``None`` when omitted.

    - empty or whitespace-only cells are omitted (never an explicit clear)
    - date fields go through :func:`parse_date`
    - ``age`` becomes a non-negative int
    - ``status`` must name a :class:`TraineeStatus` member
    - everything else is the trimmed string
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    if key in DATE_FIELDS:
        value: CoercedValue | None = parse_date(text)
    elif key is CanonicalFieldKey.AGE:
        value = _parse_age(text)
    elif key is CanonicalFieldKey.STATUS:
        value = TraineeStatus.parse(text)
    else:
        return text

    if value is None:
        # Cell contents stay out of the log; roster cells are PII.
        logger.debug("roster_field_omitted", field=key.value, length=len(text))
    return value
