"""Global exception handlers for consistent error responses.

This module registers exception handlers that convert all exceptions
to a unified JSON response format.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userbase.core.exceptions import AppException

logger = logging.getLogger("userbase.exception")


def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle all AppException subclasses."""
    extra = {
        "method": request.method,
        "path": request.url.path,
        "status_code": exc.status_code,
        "error_type": exc.error_type,
        "error_code": exc.code,
    }
    if exc.status_code >= 500:
        logger.error("AppException: %s - %s", exc.code, exc.message, extra=extra)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "type": exc.error_type,
                "code": exc.code,
                "message": "An unexpected error occurred",
            },
        )
    logger.info("AppException: %s - %s", exc.code, exc.message, extra=extra)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTPException raised by routing (unknown paths, bad methods)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "http_error",
            "code": "HTTP_ERROR",
            "message": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with unified format."""
    details = []
    messages = []
    for error in exc.errors():
        field = ".".join(
            str(loc) for loc in error["loc"] if loc not in ("body", "query", "path")
        )
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
        details.append({"field": field, "message": error["msg"]})

    return JSONResponse(
        status_code=422,
        content={
            "type": "validation_error",
            "code": "REQUEST_VALIDATION_ERROR",
            "message": "; ".join(messages),
            "details": details,
        },
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors."""
    logger.error(
        "Unhandled exception: %s %s - %s",
        request.method,
        request.url.path,
        exc,
        extra={"method": request.method, "path": request.url.path, "status_code": 500},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "type": "internal_error",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
