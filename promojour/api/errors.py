"""
JSON error responses for the API.

Every error body carries the request id set by the request middleware.
Handled HTTP errors keep the ``{success, message}`` envelope; a missing
credential is a server misconfiguration and answers ``{error, details}``.
"""
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from promojour.config import ConfigurationError
from promojour.utils import get_logger

logger = get_logger(__name__)


def _request_log(request: Request) -> Dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", "unknown"),
        "method": request.method,
        "path": request.url.path,
    }


def _reply(request: Request, status_code: int, body: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body["request_id"] = getattr(request.state, "request_id", "unknown")
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry exception instances that json cannot encode
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = jsonable_errors(exc)
    logger.warning("Request validation failed", errors=details, **_request_log(request))
    return _reply(request, 422, {"success": False, "message": "Request validation failed", "details": details})


async def on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("HTTP exception", status_code=exc.status_code, detail=exc.detail, **_request_log(request))
    return _reply(
        request,
        exc.status_code,
        {"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def on_configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Configuration error", error=str(exc), **_request_log(request))
    return _reply(request, 500, {"error": "Server misconfigured", "details": str(exc)})


async def on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
        **_request_log(request)
    )
    return _reply(request, 500, {"success": False, "message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(StarletteHTTPException, on_http_error)
    app.add_exception_handler(ConfigurationError, on_configuration_error)
    app.add_exception_handler(Exception, on_unhandled_error)


__all__ = ["register_exception_handlers", "jsonable_errors"]
