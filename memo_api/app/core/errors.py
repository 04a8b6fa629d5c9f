"""
Service error types and their HTTP rendering.

Services raise a subclass of ``ServiceError`` for every rejected
request.  Each error carries the human readable ``error`` string, the
numeric ``code`` documented for the endpoint that raised it and an HTTP
status.  Codes are only unique within one endpoint.  The handler
registered in ``main.create_app`` turns any ``ServiceError`` into a
``{"error": ..., "code": ...}`` JSON response.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ServiceError(Exception):
    """Base class for errors reported to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, code: int, status_code: int | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.error, "code": self.code}


class ValidationError(ServiceError):
    """Malformed input: bad username, bad contents, bad id or list type."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ServiceError):
    """Missing session or rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(ServiceError):
    """Authenticated, but not the owner of the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(ServiceError):
    """The database failed.  Never retried; the request ends here."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str = "STORAGE FAILURE", code: int = 0) -> None:
        super().__init__(error, code)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a ``ServiceError`` as ``{"error", "code"}`` JSON."""
    if isinstance(exc, StorageError):
        logging.getLogger(__name__).error(
            "Storage failure on %s %s", request.method, request.url.path, exc_info=exc.__cause__ or exc
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
