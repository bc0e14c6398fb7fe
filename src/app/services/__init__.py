"""Services package - Business logic layer."""
from .roster import RosterImporter, render_csv

__all__ = [
    "RosterImporter",
    "render_csv",
]
