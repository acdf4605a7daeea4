"""Domain exceptions and their HTTP rendering.

Services raise these; the FastAPI handlers registered in ``app.main`` turn
them into ``ErrorResponse`` bodies with a stable ``error_code``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for rejections raised by the core services."""

    status_code = 400
    error_code = "DOMAIN_ERROR"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class AuthorizationError(DomainError):
    """The target employee is outside the caller's visible set."""

    status_code = 403
    error_code = "AUTHORIZATION_ERROR"


class ValidationError(DomainError):
    """Bad hours, dates, statuses or missing fields."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class CapacityExceeded(ValidationError):
    """A worklog would push logged hours past the component's total."""

    error_code = "CAPACITY_EXCEEDED"


class ConflictError(DomainError):
    """The operation conflicts with the current state of the record."""

    status_code = 409
    error_code = "CONFLICT"


class ComponentLocked(ConflictError):
    """Worklogs of a completed component are immutable."""

    error_code = "COMPONENT_LOCKED"


class MustUseStatusTransition(ConflictError):
    """A worklog edit would complete the component implicitly."""

    error_code = "MUST_USE_STATUS_TRANSITION"


class NotFoundError(DomainError):
    """Unknown employee, work item, component, worklog or project."""

    status_code = 404
    error_code = "NOT_FOUND"


class TransactionError(DomainError):
    """Persistence failed mid-operation; the transaction was rolled back."""

    status_code = 500
    error_code = "TRANSACTION_ERROR"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a DomainError as an ErrorResponse."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.detail)
    body = ErrorResponse(detail=exc.detail, error_code=exc.error_code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain exception handlers to the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
