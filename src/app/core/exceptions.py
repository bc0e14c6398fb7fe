"""
Custom Exception Classes.

Provides a hierarchy of domain-specific exceptions that are automatically
converted to appropriate HTTP responses by the global exception handler.
"""

from typing import Any


class AppException(Exception):
    """
    Base exception for all application-specific errors.

    All custom exceptions should inherit from this class.
    The global exception handler converts these to HTTP responses.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "APP_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }

# ============================================
# 4xx Client Errors
# ============================================

class BadRequestError(AppException):
    """Invalid request data or parameters (400)."""

    def __init__(
        self,
        message: str = "Invalid request",
        error_code: str = "BAD_REQUEST",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=400,
            details=details,
        )

class UnauthorizedError(AppException):
    """Authentication required or failed (401)."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: str = "UNAUTHORIZED",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=401,
            details=details,
        )

class NotFoundError(AppException):
    """Resource not found (404)."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "NOT_FOUND",
        resource_type: str | None = None,
        resource_id: str | int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=404,
            details=details,
        )

class ConflictError(AppException):
    """Resource conflict, e.g., duplicate entry (409)."""

    def __init__(
        self,
        message: str = "Resource conflict",
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=409,
            details=details,
        )

class PayloadTooLargeError(AppException):
    """Uploaded payload exceeds a configured limit (413)."""

    def __init__(
        self,
        message: str = "Payload too large",
        error_code: str = "PAYLOAD_TOO_LARGE",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=413,
            details=details,
        )


class ValidationError(AppException):
    """Data validation failed (422)."""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: str = "VALIDATION_ERROR",
        errors: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if errors:
            details["validation_errors"] = errors
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=422,
            details=details,
        )

# ============================================
# 5xx Server Errors
# ============================================

class InternalServerError(AppException):
    """Internal server error (500)."""

    def __init__(
        self,
        message: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=500,
            details=details,
        )

# ============================================
# Domain-Specific Exceptions
# ============================================

class TraineeNotFoundError(NotFoundError):
    """Trainee resource not found."""

    def __init__(self, trainee_id: str | None = None, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Trainee not found: {trainee_id}",
            error_code="TRAINEE_NOT_FOUND",
            resource_type="trainee",
            resource_id=trainee_id,
        )

class TraineeAlreadyExistsError(ConflictError):
    """A trainee with the same identifying number already exists.

    The message always carries the word "duplicate" so that callers which
    only see error text (the roster importer) can classify it.
    """

    def __init__(self, ssn: str | None = None, original_error: str | None = None) -> None:
        details: dict[str, Any] = {}
        if ssn:
            details["ssn"] = ssn
        if original_error:
            details["original_error"] = original_error

        if ssn:
            message = f"Trainee with SSN '{ssn}' already exists (duplicate identity)"
        else:
            message = "Trainee violates a uniqueness constraint (duplicate identity)"

        super().__init__(
            message=message,
            error_code="TRAINEE_ALREADY_EXISTS",
            details=details,
        )

class TraineeNotSavedError(InternalServerError):
    """The database refused a trainee write for a reason other than uniqueness.

    The message is fixed: driver errors echo the SQL statement and its bound
    parameters, which include SSNs.
    """

    def __init__(self, error_type: str | None = None) -> None:
        super().__init__(
            message="Trainee record could not be saved",
            error_code="TRAINEE_NOT_SAVED",
            details={"error_type": error_type} if error_type else None,
        )

class RowValidationError(ValidationError):
    """A single roster row lacks the minimum identity to be stored."""

    def __init__(self, row: int, reason: str) -> None:
        self.row = row
        self.reason = reason
        super().__init__(
            message=f"Row {row}: {reason}",
            error_code="ROW_VALIDATION_FAILED",
            details={"row": row, "reason": reason},
        )

class ImportAbortedError(BadRequestError):
    """A roster import was refused before any row was processed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            error_code="IMPORT_ABORTED",
            details=details,
        )

class MissingActorError(UnauthorizedError):
    """No acting user could be resolved for a write operation."""

    def __init__(self, message: str = "No acting user id available for this operation") -> None:
        super().__init__(
            message=message,
            error_code="MISSING_ACTOR",
        )

class FileValidationError(BadRequestError):
    """File upload validation failed."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        allowed_types: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if filename:
            details["filename"] = filename
        if allowed_types:
            details["allowed_types"] = allowed_types
        super().__init__(
            message=message,
            error_code="FILE_VALIDATION_ERROR",
            details=details,
        )
