# texttide/middleware/error_handler.py
# Structured error handling middleware
# Catches unhandled exceptions and returns consistent JSON responses

import logging
import traceback
from typing import Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from texttide.exceptions import AppError, MethodNotAllowedError, error_body
from texttide.utils.logger import log_exception

logger = logging.getLogger(__name__)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict = None,
    request_id: str = None,
    headers: dict = None
) -> JSONResponse:
    """Create a standardized JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content=error_body(error_code, message, details, request_id),
        headers=headers,
    )


def allowed_methods(request: Request, exc: StarletteHTTPException) -> list[str]:
    """Every method some route serves on the requested path.

    Starlette reports only the first route whose path matched, so sibling
    routes on the same path are added from the routers mounted by create_app.
    """
    allow = (exc.headers or {}).get("Allow", "")
    methods = [m.strip() for m in allow.split(",") if m.strip()]
    path = request.url.path
    for prefix, router in getattr(request.app.state, "mounted_routers", ()):
        if not path.startswith(prefix):
            continue
        for route in router.routes:
            route_methods = getattr(route, "methods", None)
            path_regex = getattr(route, "path_regex", None)
            if not route_methods or path_regex is None:
                continue
            if path_regex.match(path[len(prefix):]) is None:
                continue
            for method in sorted(route_methods):
                if method not in methods:
                    methods.append(method)
    return methods


def _request_id(request: Request) -> str:
    return request.headers.get("X-Request-ID", str(id(request)))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all unhandled exceptions and returns
    consistent JSON error responses.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = _request_id(request)

        try:
            return await call_next(request)

        except AppError as e:
            logger.warning(
                f"AppError: {e.error_code} - {e.message}",
                extra={"request_id": request_id, "path": request.url.path}
            )
            return create_error_response(
                error_code=e.error_code,
                message=e.message,
                status_code=e.status_code,
                details=e.details,
                request_id=request_id
            )

        except Exception as e:
            error_details = None
            if self.debug:
                error_details = {
                    "type": type(e).__name__,
                    "traceback": traceback.format_exc()
                }

            log_exception(e, context=f"Unhandled error on {request.url.path}")
            logger.error(
                f"Unhandled exception: {type(e).__name__}: {str(e)}",
                extra={"request_id": request_id, "path": request.url.path},
                exc_info=True
            )

            return create_error_response(
                error_code="INTERNAL_ERROR",
                message="An internal error occurred. Please try again later.",
                status_code=500,
                details=error_details,
                request_id=request_id
            )


def setup_exception_handlers(app):
    """Register exception handlers on FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log_exception(exc, context=f"{request.method} {request.url.path}")
        headers = None
        if isinstance(exc, MethodNotAllowedError):
            headers = {"Allow": ", ".join(exc.allowed)}
        return create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            status_code=exc.status_code,
            details=exc.details,
            request_id=_request_id(request),
            headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed JSON and wrongly typed fields are plain 400s
        return create_error_response(
            error_code="VALIDATION_ERROR",
            message="Invalid request",
            status_code=400,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
            request_id=_request_id(request)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return await app_error_handler(
                request, MethodNotAllowedError(request.method, allowed_methods(request, exc))
            )
        return create_error_response(
            error_code="HTTP_ERROR",
            message=str(exc.detail),
            status_code=exc.status_code,
            request_id=_request_id(request),
            headers=getattr(exc, "headers", None)
        )
