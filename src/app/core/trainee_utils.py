"""Shared trainee-related helper utilities.

Used by both the roster importer and the interactive edit endpoint, so they
live here rather than inside either caller.
"""
from __future__ import annotations

from datetime import date


def derive_age(birth_date: date, today: date) -> int:
    """Return the number of full years between *birth_date* and *today*.

    One year is subtracted when today's month/day falls strictly before the
    birth month/day.  A birth date in the future yields 0.
    """
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(years, 0)


def compose_display_name(
    first_name: str | None,
    middle_name: str | None,
    last_name: str | None,
) -> str | None:
    """Join the non-empty name parts with single spaces, or None if all are empty."""
    parts = [p.strip() for p in (first_name, middle_name, last_name) if p and p.strip()]
    return " ".join(parts) or None
