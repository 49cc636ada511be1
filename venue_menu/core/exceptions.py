"""
Typed failures raised by the menu services.

The services never build HTTP responses themselves; the application maps
each subclass of MenuError to a status code and a machine readable code
in ``register_exception_handlers``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MenuError(Exception):
    """Base class for expected menu failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(MenuError):
    """A referenced venue, category, item or parent does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class CircularReferenceError(MenuError):
    """A category re-parent would make a category its own ancestor."""


class LastCategoryError(MenuError):
    """Attempt to delete the only remaining category of a venue."""


class TargetRequiredError(MenuError):
    """Move-strategy delete without a target category."""


class InvalidOrderError(MenuError):
    """A reorder list is not exactly the persisted sibling set."""


class OrderConflictError(MenuError):
    """A concurrent write took the display order this call tried to append at."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


async def menu_error_handler(request: Request, exc: MenuError) -> JSONResponse:
    logger.warning(
        "%s on %s %s: %s", exc.code, request.method, request.url.path, exc.detail
    )
    return JSONResponse(
        {"code": exc.code, "detail": exc.detail}, status_code=exc.status_code
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"code": "INTERNAL_ERROR", "detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the MenuError and catch-all handlers to *app*."""
    app.add_exception_handler(MenuError, menu_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
