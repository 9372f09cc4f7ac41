# texttide/exceptions.py
# Application error hierarchy shared by services and both HTTP surfaces


class AppError(Exception):
    """Base application error with structured response."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class ValidationError(AppError):
    """Request validation failed."""
    def __init__(self, message: str = "Validation failed", details: dict = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class ForbiddenError(AppError):
    """Requester may not modify the resource."""
    def __init__(self, message: str = "Not authorized", details: dict = None):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            details=details
        )


class NotFoundError(AppError):
    """Resource not found."""
    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details
        )


class MethodNotAllowedError(AppError):
    """HTTP verb not served on this path."""
    def __init__(self, method: str, allowed: list[str]):
        super().__init__(
            message=f"Method {method} Not Allowed",
            error_code="METHOD_NOT_ALLOWED",
            status_code=405,
        )
        self.allowed = list(allowed)


class StorageError(AppError):
    """Reading or writing the clipboard store failed."""
    def __init__(self, message: str = "Storage operation failed", details: dict = None):
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            status_code=500,
            details=details
        )


def error_body(
    error_code: str,
    message: str,
    details: dict = None,
    request_id: str = None
) -> dict:
    """Standard JSON error envelope used by every surface."""
    content = {
        "error": {
            "code": error_code,
            "message": message,
        }
    }

    if details:
        content["error"]["details"] = details

    if request_id:
        content["error"]["request_id"] = request_id

    return content
