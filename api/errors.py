"""
Exception handlers — every failure leaves as ``{"success": false, "message": ...}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException

from utils.errors import AppError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_STORE_MESSAGE = "Request could not be completed"


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        field = ".".join(loc)
        msg = err.get("msg", "invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or ValidationError.message


async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.message, exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(_describe_validation(exc), ValidationError.status_code)


async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(str(exc.detail), exc.status_code)


def _client_message(request: Request, exc: BaseException) -> str:
    # The raw message is returned to the client unless hardened.
    if not request.app.state.settings.expose_store_errors:
        return GENERIC_STORE_MESSAGE
    return str(exc) or type(exc).__name__


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s %s", request.method, request.url.path, exc_info=exc)
    orig = exc.orig if isinstance(exc, DBAPIError) else None
    return error_response(_client_message(request, orig or exc), 400)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(_client_message(request, exc), 400)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
