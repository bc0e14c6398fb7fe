"""Models package - SQLAlchemy ORM models."""
from .enums import TraineeStatus
from .trainee import Trainee

__all__ = [
    "Trainee",
    "TraineeStatus",
]
