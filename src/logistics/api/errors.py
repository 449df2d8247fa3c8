"""Translate engine errors into JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from logistics.errors import LogisticsError
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


async def logistics_error_handler(request: Request, exc: LogisticsError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code.value, error=exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Map ``LogisticsError`` by its code and Protean's own errors by Protean's rules."""
    register_exception_handlers(app)
    app.add_exception_handler(LogisticsError, logistics_error_handler)
