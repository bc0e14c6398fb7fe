"""Repositories package - Data access layer."""
from .trainee_repository import TraineeRepository

__all__ = [
    "TraineeRepository",
]
