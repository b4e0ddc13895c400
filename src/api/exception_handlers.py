"""Exception handlers for the FastAPI application.

Card URLs are embedded as images, so errors under ``/card/`` are answered
with a fallback SVG of the matching size. Everything else gets JSON.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode
from core.rate_limit import SVG_MEDIA_TYPE, card_kind_for_path
from domain.rendering.fallback import render_fallback

logger = structlog.get_logger()

CARD_PATH_PREFIX = "/card/"


def is_card_request(request: Request) -> bool:
    return request.url.path.startswith(CARD_PATH_PREFIX)


def fallback_svg_response(request: Request, message: str, status_code: int) -> Response:
    kind = card_kind_for_path(request.url.path)
    return Response(
        content=render_fallback(message, kind.width, kind.height),
        status_code=status_code,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": "no-store"},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> Response:
        """Handle custom application exceptions."""
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
        )
        if is_card_request(request):
            return fallback_svg_response(request, exc.message, exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": exc.error_code.value,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        """Handle HTTP exceptions from FastAPI/Starlette."""
        if is_card_request(request):
            return fallback_svg_response(request, str(exc.detail), exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": "HTTP_ERROR",
                "message": exc.detail,
                "details": None,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.info("validation_error", errors=exc.errors())
        return JSONResponse(
            status_code=422,
            content={
                "error_code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Request validation failed",
                "details": [
                    {
                        "field": ".".join(str(x) for x in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> Response:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        message = "An unexpected error occurred"
        if not settings.is_production:
            message = str(exc)

        if is_card_request(request):
            return fallback_svg_response(request, "Unable to render card", 500)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": ErrorCode.INTERNAL_ERROR.value,
                "message": message,
                "details": {"request_id": request_id},
            },
        )
