"""Error taxonomy and the FastAPI handlers that translate it to HTTP."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings


class HeatmapError(Exception):
    """Base class for errors the API knows how to present."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, detail: str | None = None):
        super().__init__(message)
        self.message = message
        # Driver-level detail; only shown when the settings allow it.
        self.detail = detail


class ConfigurationError(HeatmapError):
    """No warehouse handle is configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class TransientQueryError(HeatmapError):
    """Driver, network or timeout failure while talking to the warehouse."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(HeatmapError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidParameterError(HeatmapError):
    status_code = status.HTTP_400_BAD_REQUEST


def _error_body(message: str, detail: str | None, settings: Settings) -> dict[str, str]:
    body = {"error": message}
    if detail and settings.expose_error_details:
        body["message"] = detail
    return body


def init_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach the HeatmapError and catch-all handlers to the app."""

    async def heatmap_error_handler(request: Request, exc: HeatmapError):
        if exc.status_code >= 500:
            logger.bind(
                path=str(request.url.path),
                error=exc.message,
                detail=exc.detail,
            ).error("request_failed")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.detail, settings),
        )

    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.bind(path=str(request.url.path)).exception("unhandled_exception")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error", str(exc), settings),
        )

    app.add_exception_handler(HeatmapError, heatmap_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
