"""Translation of failures into structured JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.errors import TaskboardError
from taskboard.models import ApiError
from taskboard.utils.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(request: Request, status: int, error: str, message: str) -> JSONResponse:
    body = ApiError(status=status, error=error, message=message, path=request.url.path)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


def format_validation_errors(exc: RequestValidationError) -> str:
    """Render validation failures as ``field:reason`` pairs, one per error."""
    parts = []
    for error in exc.errors():
        location = [str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        reason = error.get("msg", "invalid value").removeprefix("Value error, ")
        parts.append(f"{field}:{reason}")
    return "[" + ", ".join(parts) + "]"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers shared by every route."""

    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
        log = logger.warning if exc.status_code in (401, 403) else logger.info
        log(
            "request_failed",
            error=type(exc).__name__,
            status=exc.status_code,
            message=exc.message,
        )
        return error_response(request, exc.status_code, type(exc).__name__, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = format_validation_errors(exc)
        logger.info("request_invalid", message=message)
        return error_response(request, 400, "ValidationError", message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(request, exc.status_code, type(exc).__name__, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request_crashed", error=type(exc).__name__)
        return error_response(request, 500, type(exc).__name__, INTERNAL_ERROR_MESSAGE)
