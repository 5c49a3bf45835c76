from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware

from taskapi import __version__
from taskapi.core.config import get_settings
from taskapi.core.errors import AppError, normalize_error
from taskapi.core.logging import configure_logging
from taskapi.repositories import Store, open_store
from taskapi.routers import tasks as tasks_router
from taskapi.routers import users as users_router
from taskapi.services import TaskService, UserService

APP_TITLE = "Task Management API"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time of every request.

    Unhandled errors are turned into the ServerError envelope here rather than
    by an ``Exception`` handler, which Starlette would re-raise past this
    middleware after logging it a second time.
    """

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = _error_response(request, exc)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} {} {:.1f}ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def _install_store(app: FastAPI, store: Store) -> None:
    app.state.store = store
    app.state.user_service = UserService(store)
    app.state.task_service = TaskService(store)


def _error_response(request: Request, exc: Exception) -> JSONResponse:
    api_error = normalize_error(exc)
    if api_error.status >= 500:
        logger.opt(exception=exc).error("{} {} failed: {}", request.method, request.url.path, exc)
    else:
        logger.warning("{} {} -> {} {}", request.method, request.url.path, api_error.type, api_error.message)
    return JSONResponse(api_error.envelope(), status_code=api_error.status)


def _register_error_handlers(app: FastAPI) -> None:
    for exc_class in (AppError, RequestValidationError, IntegrityError):
        app.add_exception_handler(exc_class, _error_response)


def create_app(store: Optional[Store] = None) -> FastAPI:
    """Build the API. Without an explicit store one is opened at startup."""
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "store", None) is None:
            _install_store(app, open_store(settings))
        logger.info("{} started in {} mode", APP_TITLE, app.state.store.mode)
        yield

    app = FastAPI(title=APP_TITLE, version=__version__, lifespan=lifespan)
    if store is not None:
        _install_store(app, store)

    origins = list(settings.cors_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials="*" not in origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )
    app.add_middleware(RequestLogMiddleware)
    _register_error_handlers(app)

    @app.get("/")
    def index(request: Request):
        current = getattr(request.app.state, "store", None)
        return {
            "success": True,
            "data": {
                "name": APP_TITLE,
                "version": __version__,
                "mode": current.mode if current else None,
            },
        }

    app.include_router(users_router.router)
    app.include_router(tasks_router.router)
    return app
