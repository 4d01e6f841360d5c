"""Delivery error to HTTP response mapping."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shipping.api.schemas import ErrorResponse
from shipping.delivery.exceptions import (
    DeliveryError,
    DeliveryNotFoundError,
    DuplicateKeyError,
    DuplicateOrderError,
    InvalidSignatureError,
    InvalidStatusError,
    NoProviderAvailableError,
    NoStatusChangeError,
    ProviderUnavailableError,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    DuplicateOrderError: 409,
    DuplicateKeyError: 409,
    NoProviderAvailableError: 503,
    ProviderUnavailableError: 502,
    DeliveryNotFoundError: 404,
    InvalidStatusError: 400,
    NoStatusChangeError: 200,
    InvalidSignatureError: 401,
}


def status_code_for(exc: DeliveryError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return 500


async def delivery_error_handler(request: Request, exc: DeliveryError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("Delivery request failed", path=request.url.path, error=exc.code, message=exc.message)
    else:
        logger.info("Delivery request rejected", path=request.url.path, error=exc.code, message=exc.message)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.code, message=exc.message).model_dump(),
    )


def register_shipping_exception_handlers(app: FastAPI) -> None:
    """Install protean's validation handlers plus the delivery error mapping."""
    register_exception_handlers(app)
    app.add_exception_handler(DeliveryError, delivery_error_handler)
