"""Shared Enums for the application.

Defines enum types used across models and schemas.
"""
from enum import Enum


class TraineeStatus(str, Enum):
    """Lifecycle status of a trainee on the clinic roster.

    Attributes:
        ACTIVE: Trainee can be scheduled for services (default for new rows)
        INACTIVE: Trainee is retained for history but hidden from scheduling
    """
    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def default(cls) -> "TraineeStatus":
        """Return the default status for new trainees."""
        return cls.ACTIVE

    @classmethod
    def parse(cls, raw: str) -> "TraineeStatus | None":
        """Match *raw* case-insensitively against the member values."""
        normalized = raw.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None
