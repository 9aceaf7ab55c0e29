# common/api_error/ApiError.py
class AppError(Exception):
    """Base error for all application-specific issues."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(self.message)


class NotFoundError(AppError):
    """Raised when a requested clinic record does not exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} '{identifier}' not found",
            status_code=404,
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
        )
        self.resource = resource
        self.identifier = identifier


class ConflictError(AppError):
    """Raised when a write would break a uniqueness rule (one role per user, etc.)."""

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message=message, status_code=409, code=code)


class ValidationFailedError(AppError):
    """Business-rule validation that pydantic cannot express."""

    def __init__(self, message: str, code: str = "VALIDATION_FAILED"):
        super().__init__(message=message, status_code=422, code=code)


class DatabaseError(AppError):
    """Specific for DB issues."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=500, code="DATABASE_ERROR")


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "ValidationFailedError",
    "DatabaseError",
]
