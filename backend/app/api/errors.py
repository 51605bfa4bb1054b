"""Maps billing domain errors onto HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.core.exceptions import (
    BillingError,
    ConsistencyError,
    NotFoundError,
    QuotaExceededError,
    ReferencedEntityError,
    SubscriptionExpiredError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# exception class -> (status code, machine-readable code); most specific first
ERROR_RESPONSES = [
    (ValidationError, 400, "validation_error"),
    (NotFoundError, 404, "not_found"),
    (ReferencedEntityError, 409, "referenced_entity"),
    (QuotaExceededError, 403, "quota_exceeded"),
    (SubscriptionExpiredError, 403, "subscription_expired"),
    (ConsistencyError, 500, "consistency_error"),
]


def _make_handler(status_code: int, code: str):
    async def handler(request: Request, exc: BillingError) -> JSONResponse:
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": code})

    return handler


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, status_code, code in ERROR_RESPONSES:
        app.add_exception_handler(exc_class, _make_handler(status_code, code))
