"""
Standardized API Response Schemas.

Every JSON endpoint wraps its payload in one of these envelopes so the admin
console can treat success, pagination and errors uniformly.
"""
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from .config import get_settings

T = TypeVar("T")


class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""

    request_id: str | None = Field(
        default=None,
        description="Unique request identifier for tracing"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Response timestamp (UTC)"
    )
    version: str = Field(
        default_factory=lambda: get_settings().APP_VERSION,
        description="API version"
    )


class GenericResponse(BaseModel, Generic[T]):
    """
    Generic wrapper for successful API responses.

    Example:
        ```python
        @router.get("/trainees/{trainee_id}", response_model=GenericResponse[TraineeResponse])
        async def get_trainee(trainee_id: str) -> GenericResponse[TraineeResponse]:
            trainee = await repo.get_by_id_or_raise(trainee_id)
            return GenericResponse(message="Trainee retrieved successfully", data=trainee)
        ```
    """

    success: bool = Field(default=True, description="Indicates successful response")
    message: str = Field(description="Human-readable response message")
    data: T = Field(description="Response payload")
    meta: ResponseMeta = Field(default_factory=ResponseMeta, description="Response metadata")


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int = Field(description="Total number of items")
    page: int = Field(ge=1, description="Current page number")
    page_size: int = Field(ge=1, le=100, description="Items per page")
    total_pages: int = Field(description="Total number of pages")
    has_next: bool = Field(description="Whether there are more pages")
    has_previous: bool = Field(description="Whether there are previous pages")

    @classmethod
    def from_total(cls, total: int, page: int, page_size: int) -> "PaginationMeta":
        """Create pagination meta from total count."""
        total_pages = max(1, (total + page_size - 1) // page_size)
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic wrapper for paginated list responses."""

    success: bool = Field(default=True)
    message: str
    data: list[T] = Field(description="List of items")
    pagination: PaginationMeta
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: dict | None = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Error envelope produced by the global exception handlers."""

    success: bool = Field(default=False)
    error: ErrorDetail
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class HealthCheck(BaseModel):
    """Individual health check result."""

    status: str = Field(description="Component status: healthy/unhealthy/degraded")
    latency_ms: float | None = Field(default=None, description="Response time in milliseconds")
    message: str | None = Field(default=None, description="Additional status information")


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Service health status")
    service: str = Field(description="Service name")
    version: str = Field(description="Service version")
    environment: str = Field(description="Deployment environment")
    checks: dict[str, HealthCheck] = Field(
        default_factory=dict,
        description="Individual component health checks"
    )
