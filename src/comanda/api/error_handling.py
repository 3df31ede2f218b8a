from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from comanda.api.dependencies import UnauthenticatedError
from comanda.api.middleware.request_context import get_request_id
from comanda.application.use_cases.advance_unit import (
    OrderUnitNotFoundError,
    UnitTransitionRejectedError,
)
from comanda.application.use_cases.create_order import (
    EmptyOrderError,
    InvalidOrderError,
    OrderValidationError,
    ProductNotFoundError,
)
from comanda.application.use_cases.get_order import InvalidOrderFilterError, OrderNotFoundError
from comanda.application.use_cases.table_occupancy import TableNotFoundError
from comanda.application.use_cases.update_order import InvalidOrderTransitionError
from comanda.domain.table.entities import TableCapacityExceededError, TableNotAvailableError

logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"method": request.method, "path": request.url.path},
    )
    return _error_response(
        status_code=500,
        code="INTERNAL_ERROR",
        message="internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (UnauthenticatedError, 401, "UNAUTHENTICATED"),
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (TableNotFoundError, 404, "TABLE_NOT_FOUND"),
        (ProductNotFoundError, 404, "PRODUCT_NOT_FOUND"),
        (OrderUnitNotFoundError, 404, "ORDER_UNIT_NOT_FOUND"),
        (InvalidOrderError, 400, "INVALID_ORDER_TYPE"),
        (EmptyOrderError, 400, "EMPTY_ORDER"),
        (OrderValidationError, 400, "ORDER_VALIDATION_FAILED"),
        (InvalidOrderFilterError, 400, "INVALID_REQUEST"),
        (InvalidOrderTransitionError, 400, "INVALID_ORDER_TRANSITION"),
        (UnitTransitionRejectedError, 400, "INVALID_UNIT_TRANSITION"),
        (TableNotAvailableError, 400, "TABLE_NOT_AVAILABLE"),
        (TableCapacityExceededError, 400, "TABLE_CAPACITY_EXCEEDED"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
