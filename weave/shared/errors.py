"""
Standardized error responses and domain exceptions for the Weave service.

Every error leaving the API uses the same envelope:

    {"error": {"code": "...", "message": "...", "details": {...}, "correlation_id": "..."}}

Domain exceptions carry their own status code and error code so the
application-level exception handler can render them without each route
repeating the mapping.

Usage:
    from weave.shared.errors import MemorySystemNotConfigured
    raise MemorySystemNotConfigured()

    # In an exception handler:
    return error_response(
        code=ErrorCode.SERVICE_UNAVAILABLE,
        message="Memory system not configured",
        status_code=503,
        correlation_id=get_correlation_id(request),
    )
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel
from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    """Standard error codes used across the service."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Domain-specific errors
    MEMORY_NOT_CONFIGURED = "MEMORY_NOT_CONFIGURED"
    SYNC_ERROR = "SYNC_ERROR"


class ErrorDetail(BaseModel):
    """Structured error detail model."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""
    error: ErrorDetail


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class WeaveError(Exception):
    """Base class for errors that map onto an API error response."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class MemorySystemNotConfigured(WeaveError):
    """Raised when the vector index is not configured (no PINECONE_API_KEY)."""

    status_code = 503
    code = ErrorCode.MEMORY_NOT_CONFIGURED

    def __init__(self, message: str = "Memory system not initialized - configure Pinecone API key"):
        super().__init__(
            message,
            details={"hint": "Add PINECONE_API_KEY to .env to enable memory features"},
        )


class LinearAPIError(WeaveError):
    """Raised when the Linear GraphQL API returns an error."""

    status_code = 502
    code = ErrorCode.EXTERNAL_SERVICE_ERROR

    def __init__(self, message: str):
        super().__init__(message, details={"service": "linear"})


class TeamMappingNotFound(WeaveError):
    """Raised when a Linear team has no mapping to an internal tenant."""

    status_code = 404
    code = ErrorCode.NOT_FOUND

    def __init__(self, linear_team_id: Optional[str]):
        super().__init__(
            "Team integration not found",
            details={"linear_team_id": linear_team_id or "unknown"},
        )


# =============================================================================
# RESPONSE HELPERS
# =============================================================================

def get_correlation_id(request: Optional[Request] = None) -> Optional[str]:
    """Extract the correlation ID from request state, if any."""
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a standardized JSON error response.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with standardized error format
    """
    error_detail = ErrorDetail(
        code=code.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": error_detail.model_dump(exclude_none=True)},
    )


def validation_error(
    message: str,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Create a 400 validation error response."""
    return error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        status_code=400,
        details=details,
        correlation_id=correlation_id,
    )


def http_error(
    status_code: int,
    message: str,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Render an HTTPException raised by a route in the standard envelope."""
    codes = {
        400: ErrorCode.BAD_REQUEST,
        401: ErrorCode.UNAUTHORIZED,
        404: ErrorCode.NOT_FOUND,
        422: ErrorCode.VALIDATION_ERROR,
        502: ErrorCode.EXTERNAL_SERVICE_ERROR,
        503: ErrorCode.SERVICE_UNAVAILABLE,
    }
    code = codes.get(status_code, ErrorCode.INTERNAL_ERROR if status_code >= 500 else ErrorCode.BAD_REQUEST)
    return error_response(
        code=code,
        message=message,
        status_code=status_code,
        correlation_id=correlation_id,
    )


def domain_error(error: WeaveError, correlation_id: Optional[str] = None) -> JSONResponse:
    """Render a WeaveError in the standard envelope."""
    return error_response(
        code=error.code,
        message=error.message,
        status_code=error.status_code,
        details=error.details,
        correlation_id=correlation_id,
    )


def internal_error(
    message: str = "Internal server error",
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a 500 internal error response.

    Note: Be careful not to expose sensitive internal details to clients.
    """
    return error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message=message,
        status_code=500,
        details=details,
        correlation_id=correlation_id,
    )
