"""
Global exception handlers turning errors into the ``{status, data}`` /
``{status, message}`` envelopes.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from keychat.core.errors import MessengerError, InternalError, ForbiddenError
from .auth_api import AuthAPI

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_messenger_error_handler(app)
    _register_validation_error_handler(app)
    _register_unmatched_route_handler(app)
    _register_generic_error_handler(app)


def _register_messenger_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MessengerError)
    async def messenger_error_handler(request: Request, exc: MessengerError):
        if exc.status == "error":
            logger.error(
                "Internal error on %s: %r", request.url.path, exc.__cause__ or exc,
            )
        else:
            logger.info("%s on %s: %s", exc.kind.value, request.url.path, exc.fields)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            "Validation error on %s: %s", request.url.path, exc.errors(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(
            "Unhandled exception on %s: %s", request.url.path, exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InternalError().to_response(),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    data = {}
    for error in exc.errors():
        # ("body", "username") -> "username"
        loc = [str(part) for part in error["loc"] if part != "body"]
        data[".".join(loc) or "body"] = error["msg"]
    return {"status": "fail", "data": data}


def _register_unmatched_route_handler(app: FastAPI) -> None:
    """
    Unknown paths and wrong methods still require an api key:
    without one they answer 403 like every protected route.
    """

    async def unmatched_route_handler(request: Request, exc: StarletteHTTPException):
        is_public = (request.method, request.url.path) in AuthAPI.PUBLIC_ROUTES
        if not is_public and AuthAPI.extract_api_key(request.headers.get("authorization")) is None:
            error = ForbiddenError({"apiKey": "No api key in Authorization header"})
            return JSONResponse(status_code=error.http_status, content=error.to_response())
        return await http_exception_handler(request, exc)

    app.add_exception_handler(status.HTTP_404_NOT_FOUND, unmatched_route_handler)
    app.add_exception_handler(status.HTTP_405_METHOD_NOT_ALLOWED, unmatched_route_handler)
