"""
Error taxonomy and the handlers that render it.

Services raise these; the API layer never builds error payloads by hand.
Every error leaves the process as:

    {"success": false, "message": "<human readable>"}
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from loguru import logger


class JobBoardError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgumentError(JobBoardError):
    status_code = 400
    default_message = "Invalid request"


class UnauthenticatedError(JobBoardError):
    status_code = 401
    default_message = "Not authorized"


class ForbiddenError(JobBoardError):
    status_code = 403
    default_message = "Not authorized to access this resource"


class NotFoundError(JobBoardError):
    status_code = 404
    default_message = "Not found"


class ConflictError(JobBoardError):
    status_code = 409
    default_message = "Document was modified concurrently, reload and retry"


class InternalError(JobBoardError):
    status_code = 500
    default_message = "Server error"


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach envelope-rendering handlers to the app."""

    @app.exception_handler(JobBoardError)
    async def handle_job_board_error(request: Request, exc: JobBoardError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, _format_validation_errors(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(500, InternalError.default_message)
