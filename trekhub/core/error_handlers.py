"""
Error handlers for the FastAPI application.

Every failure leaves the API in the same ``ErrorResponse`` shape; store and
unexpected errors are reduced to a generic message so internal detail never
reaches the caller.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from typing import Dict, Any, Optional

from trekhub.core.exceptions import ErrorCode, TrekHubException
from trekhub.schemas.base import ErrorResponse, to_field_errors

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


class ErrorHandler:
    """
    Renders errors as ``ErrorResponse`` bodies, logs them and keeps
    per-code counters for the health endpoint.
    """

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.last_error_time: Dict[str, float] = {}

    def render(self, request: Request, exc: TrekHubException) -> JSONResponse:
        """
        Build the response for an application exception.

        Also used by middleware, which sits outside FastAPI's exception
        handling.
        """
        request_id = _request_id(request)
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__} in request {request_id}: {exc.message}",
            extra={
                'request_id': request_id,
                'error_code': exc.error_code.value,
                'status_code': exc.status_code,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )
        self._track_error(exc.error_code.value)

        return self._create_error_response(
            error_code=exc.error_code.value,
            message=exc.message,
            # Infrastructure detail stays in the log
            details=(exc.details or None) if exc.status_code < 500 else None,
            request_id=request_id,
            status_code=exc.status_code
        )

    async def handle_trekhub_exception(
        self,
        request: Request,
        exc: TrekHubException
    ) -> JSONResponse:
        return self.render(request, exc)

    async def handle_validation_error(
        self,
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Report every failing field, as a 400 like any other ``ValidationError``."""
        request_id = _request_id(request)
        fields = to_field_errors(exc.errors())

        logger.warning(
            f"Validation error in request {request_id}: {len(fields)} field errors",
            extra={
                'request_id': request_id,
                'fields': [f['field'] for f in fields],
                'request_path': request.url.path
            }
        )
        self._track_error(ErrorCode.VALIDATION_ERROR.value)

        return self._create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR.value,
            message="Validation failed",
            details={'fields': fields},
            request_id=request_id,
            status_code=400
        )

    async def handle_http_exception(
        self,
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """
        Handle framework HTTP errors such as unknown routes or methods.
        """
        request_id = _request_id(request)

        error_code_map = {
            400: ErrorCode.VALIDATION_ERROR,
            401: ErrorCode.UNAUTHORIZED,
            403: ErrorCode.FORBIDDEN,
            404: ErrorCode.NOT_FOUND,
            503: ErrorCode.STORE_UNAVAILABLE,
        }
        error_code = error_code_map.get(exc.status_code)
        code = error_code.value if error_code else f"HTTP_{exc.status_code}"

        logger.warning(
            f"HTTP exception in request {request_id}: {exc.status_code} - {exc.detail}",
            extra={
                'request_id': request_id,
                'status_code': exc.status_code,
                'request_path': request.url.path
            }
        )

        return self._create_error_response(
            error_code=code,
            message=str(exc.detail),
            request_id=request_id,
            status_code=exc.status_code
        )

    async def handle_generic_exception(
        self,
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Log the full traceback; the caller only sees "Server error"."""
        request_id = _request_id(request)

        logger.error(
            f"Unhandled exception in request {request_id}: {type(exc).__name__}: {str(exc)}",
            exc_info=exc,
            extra={
                'request_id': request_id,
                'exception_type': type(exc).__name__,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )
        self._track_error(ErrorCode.INTERNAL_SERVER_ERROR.value)

        return self._create_error_response(
            error_code=ErrorCode.INTERNAL_SERVER_ERROR.value,
            message="Server error",
            request_id=request_id,
            status_code=500
        )

    def _create_error_response(
        self,
        error_code: str,
        message: str,
        request_id: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None
    ) -> JSONResponse:
        error_response = ErrorResponse(
            msg=message,
            error_code=error_code,
            details=details,
            request_id=request_id,
        )
        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json")
        )

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1
        self.last_error_time[error_code] = time.time()

        if self.error_counts[error_code] % 10 == 0:
            logger.warning(
                f"High frequency error detected: {error_code} occurred {self.error_counts[error_code]} times"
            )

    def get_error_statistics(self) -> Dict[str, Any]:
        """Counters served by /health."""
        current_time = time.time()

        return {
            'error_counts': dict(self.error_counts),
            'recent_errors': {
                code: count for code, count in self.error_counts.items()
                if current_time - self.last_error_time.get(code, 0) < 3600  # Last hour
            },
            'total_errors': sum(self.error_counts.values())
        }

    def reset(self) -> None:
        self.error_counts.clear()
        self.last_error_time.clear()


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app):
    """Route every exception type to the shared ``error_handler``."""

    @app.exception_handler(TrekHubException)
    async def trekhub_exception_handler(request: Request, exc: TrekHubException):
        return await error_handler.handle_trekhub_exception(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await error_handler.handle_validation_error(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return await error_handler.handle_generic_exception(request, exc)
