"""FastAPI application factory and uvicorn runner."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accesswatch import __version__
from accesswatch.common.errors import AccessWatchError, IdentityNotFoundError

from .routes import health_router, track_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from accesswatch.app import Application

log = getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal Server Error"}


async def _http_error(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StarletteHTTPException)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{location}: {message}" if location else message
    return JSONResponse({"error": detail}, status_code=status.HTTP_400_BAD_REQUEST)


async def _identity_not_found(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, IdentityNotFoundError)
    log.info(f"Rejected subscription: {exc}")
    return JSONResponse({"error": "Not Found"}, status_code=status.HTTP_404_NOT_FOUND)


async def _internal_error(_request: Request, exc: Exception) -> JSONResponse:
    log.error(f"Request failed: {exc}")
    return JSONResponse(INTERNAL_ERROR_BODY, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(
    application: Application,
    *,
    auth_string: str,
    run_background: bool = True,
) -> FastAPI:
    """Build the API around ``application``.

    With ``run_background`` the lifespan starts the reconciliation scheduler and
    any workers on startup and stops them on shutdown.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if run_background:
            application.start()
        try:
            yield
        finally:
            if run_background:
                application.stop()

    app = FastAPI(title="accesswatch", version=__version__, lifespan=lifespan)
    app.state.application = application
    app.state.auth_string = auth_string

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(IdentityNotFoundError, _identity_not_found)
    app.add_exception_handler(AccessWatchError, _internal_error)

    app.include_router(health_router)
    app.include_router(track_router)
    return app


def run_server(app: FastAPI, *, host: str, port: int, log_level: str = "info") -> None:
    """Serve ``app`` with uvicorn until interrupted."""

    log.info(f"Listening on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
