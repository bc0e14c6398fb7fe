"""API v1 endpoints package."""

from . import health, trainees

__all__ = [
	"health",
	"trainees",
]
