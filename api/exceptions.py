"""
Custom exceptions and error handlers for the API.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from api.logging_config import logger
from tmdb_browser.exceptions import StorageError, TMDBError


class APIError(HTTPException):
    """Base API error with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            error="not_found",
            message=f"{resource} with ID {identifier} not found",
            details={"resource": resource, "id": identifier},
        )


class UpstreamError(APIError):
    """TMDB answered with an error or could not be reached."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            status_code=502,
            error="upstream_error",
            message=message,
            details={"upstream_status": upstream_status},
        )


class StorageUnavailableError(APIError):
    """Local list storage failed."""

    def __init__(self, message: str = "List storage operation failed"):
        super().__init__(
            status_code=503,
            error="storage_unavailable",
            message=message,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions and return structured JSON response."""
    content = {
        "error": exc.error,
        "message": exc.message,
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def tmdb_error_handler(request: Request, exc: TMDBError) -> JSONResponse:
    """Map TMDB failures: upstream 404 stays 404, anything else is a 502."""
    if exc.is_not_found:
        error = APIError(
            status_code=404,
            error="not_found",
            message=str(exc),
            details={"path": request.url.path},
        )
    else:
        logger.warning(f"Upstream failure on {request.url.path}: {exc}")
        error = UpstreamError(str(exc), exc.status_code)
    return await api_error_handler(request, error)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Map a failed list storage call to 503 storage_unavailable."""
    logger.error(f"Storage failure on {request.url.path}: {exc}")
    return await api_error_handler(request, StorageUnavailableError(str(exc)))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )
