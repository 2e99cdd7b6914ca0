"""API middleware.

Request context binding for logs and the fallback for unhandled errors.
"""

import re
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.errors import internal_error_response

logger = structlog.get_logger()

_SESSION_PATH = re.compile(r"^/edit-sessions/(?P<session_id>[^/]+)")


# ============================================================================
# Request Context Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind request correlation data to the log context.

    The request ID is taken from the ``X-Request-ID`` header or generated,
    stored on ``request.state`` and echoed on the response. Requests to an
    edit session also bind its ``session_id``, so engine and store logs
    for one editing session can be followed across requests.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation context.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id

        context = {"request_id": request_id}
        match = _SESSION_PATH.match(request.url.path)
        if match:
            context["session_id"] = match.group("session_id")
        structlog.contextvars.bind_contextvars(**context)

        start_time = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars(*context)

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions that escaped the handlers into a 500 envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return internal_error_response(getattr(request.state, "request_id", None))


def setup_middleware(app: FastAPI) -> None:
    """Install middleware on the application.

    The error handler is added first so it wraps the request context
    middleware; last added runs first.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
