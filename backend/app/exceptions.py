"""
Typed errors raised by the directory services.

Services never build HTTP responses themselves. They raise one of the
``DirectoryError`` subclasses below and the handlers registered in
``app.main`` turn them into JSON responses of the form::

    {"success": false, "detail": "...", "code": "NOT_FOUND"}
"""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class DirectoryError(Exception):
    """Base class for expected failures of directory operations."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "DIRECTORY_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "success": False,
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidInputError(DirectoryError):
    """A required field is missing or a supplied value is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required")
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        return result


class UnauthorizedError(DirectoryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class ForbiddenError(DirectoryError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message)


class NotFoundError(DirectoryError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(DirectoryError):
    """Referential-integrity or uniqueness violation."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class InternalError(DirectoryError):
    """Persistence or unexpected failure. The message is safe to show to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"


# =============================================================================
# Exception Handlers
# =============================================================================

async def directory_exception_handler(request: Request, exc: DirectoryError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors with the offending field named."""
    errors = exc.errors()
    field = None
    if errors:
        loc = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(loc) or None
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "detail": errors[0].get("msg", "Validation error") if errors else "Validation error",
            "code": "VALIDATION_ERROR",
            "field": field,
        },
    )
