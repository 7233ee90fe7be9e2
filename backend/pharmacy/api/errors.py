"""Maps core errors to HTTP responses. The only place that knows status codes for them."""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pharmacy.core.errors import (
    Conflict, InsufficientStock, NotFound, StorageUnavailable, TotalMismatch,
)

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Validation error: " + "; ".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": _validation_message(exc)})


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def conflict_handler(request: Request, exc: Conflict) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def total_mismatch_handler(request: Request, exc: TotalMismatch) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Transaction total does not match items",
            "declared": exc.declared,
            "calculated": exc.calculated,
        },
    )


async def insufficient_stock_handler(request: Request, exc: InsufficientStock) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Insufficient stock",
            "productId": exc.product_id,
            "requested": exc.requested,
            "available": exc.available,
        },
    )


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error_id = uuid.uuid4().hex[:12]
    logger.exception(
        f"Error {error_id} on {request.method} {request.url.path}",
        extra={"error_id": error_id, "method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Internal Server Error",
            "errorId": error_id,
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(Conflict, conflict_handler)
    app.add_exception_handler(TotalMismatch, total_mismatch_handler)
    app.add_exception_handler(InsufficientStock, insufficient_stock_handler)
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
