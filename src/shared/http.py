"""Map the storefront error taxonomy onto HTTP responses.

Every error body has the same shape::

    {"error": "<code>", "message": "<localized text>", ...}

with extra keys where the error carries structured detail (field errors for
validation failures, per-product shortages for stock exhaustion).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from shared.errors import (
    EmptyCartError,
    ForbiddenError,
    InvalidQuantity,
    PersistenceFailure,
    StockExhausted,
    StorefrontError,
    UnauthenticatedError,
)
from shared.messages import negotiate_language, translate

logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES: dict[type[StorefrontError], int] = {
    EmptyCartError: 409,
    UnauthenticatedError: 401,
    ForbiddenError: 403,
    StockExhausted: 409,
    PersistenceFailure: 503,
}


def _body(request: Request, code: str, **extra) -> dict:
    language = negotiate_language(request.headers.get("Accept-Language"))
    return {"error": code, "message": translate(code, language), **extra}


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    code = "invalid_quantity" if isinstance(exc, InvalidQuantity) else "validation_error"
    return JSONResponse(
        status_code=400,
        content=_body(request, code, errors=getattr(exc, "messages", {}) or {}),
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=_body(request, "not_found", errors=getattr(exc, "messages", {}) or {}),
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = 500
    for error_class, mapped in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_class):
            status_code = mapped
            break

    extra = {"detail": exc.message}
    if isinstance(exc, StockExhausted):
        extra["shortages"] = [
            {"product_id": s.product_id, "requested": s.requested, "available": s.available}
            for s in exc.shortages
        ]

    if status_code >= 500:
        logger.warning("Request failed", path=request.url.path, error=exc.code, detail=exc.message)

    return JSONResponse(status_code=status_code, content=_body(request, exc.code, **extra))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the storefront's error handlers on a FastAPI application."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
