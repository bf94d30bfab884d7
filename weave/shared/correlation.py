"""
Correlation ID middleware for request tracing.

Each request gets an ID read from X-Correlation-ID / X-Request-ID or freshly
generated. It is stored on request.state, in a context variable (so the
logging filter can stamp every record) and echoed in the response headers.

Usage:
    from weave.shared.correlation import CorrelationMiddleware, get_correlation_id

    app.add_middleware(CorrelationMiddleware)
    correlation_id = get_correlation_id()
"""

import uuid
import contextvars
from typing import Optional, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


_correlation_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

# Incoming headers checked in order
CORRELATION_HEADERS = [
    "X-Correlation-ID",
    "X-Request-ID",
]

RESPONSE_HEADER = "X-Correlation-ID"


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current request context, or None."""
    return _correlation_id_ctx.get()


def generate_correlation_id() -> str:
    """Short (8 char) UUID4-based correlation ID."""
    return str(uuid.uuid4())[:8]


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to every request and response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        correlation_id = None
        for header in CORRELATION_HEADERS:
            correlation_id = request.headers.get(header)
            if correlation_id:
                break

        if not correlation_id:
            correlation_id = generate_correlation_id()

        request.state.correlation_id = correlation_id
        token = _correlation_id_ctx.set(correlation_id)

        try:
            response = await call_next(request)
            response.headers[RESPONSE_HEADER] = correlation_id
            return response
        finally:
            _correlation_id_ctx.reset(token)


class CorrelationContext:
    """
    Set a correlation ID outside of a request, e.g. in background tasks.

    Example:
        with CorrelationContext("linear-sync"):
            await sync_team_mappings(user_id)
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or generate_correlation_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _correlation_id_ctx.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _correlation_id_ctx.reset(self._token)
