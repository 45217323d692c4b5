from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from pulse.api.routes import register_routes
from pulse.core.config import get_settings
from pulse.core.errors import (
    InternalError,
    InvalidRequestError,
    MethodNotAllowedError,
    NotFoundError,
    ServiceError,
)
from pulse.core.logging import setup_logging
from pulse.infrastructure.db.session import build_engine, build_session_factory

logger = structlog.get_logger()


def error_body(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"message": message}
    if error:
        body["error"] = error
    return body


def describe_validation_errors(errors: list[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query"))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"message": ..., "error"?: ...}``."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            await logger.aerror("service_error", error_type=type(exc).__name__, detail=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.error))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        error = InvalidRequestError(error=describe_validation_errors(list(exc.errors())))
        await logger.ainfo("request_invalid", error=error.error)
        return JSONResponse(status_code=error.status_code, content=error_body(error.message, error.error))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == MethodNotAllowedError.status_code:
            message = MethodNotAllowedError.default_message
        elif exc.status_code == NotFoundError.status_code:
            message = NotFoundError.default_message
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
        await logger.aexception("storage_error", error_type=type(exc).__name__)
        return JSONResponse(
            status_code=InternalError.status_code,
            content=error_body(InternalError.default_message),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_: Request, exc: Exception) -> JSONResponse:
        await logger.aexception("unhandled_error", error_type=type(exc).__name__)
        return JSONResponse(
            status_code=InternalError.status_code,
            content=error_body(InternalError.default_message),
        )


def create_app() -> FastAPI:
    """Application factory for the public API."""
    settings = get_settings()
    setup_logging(settings.log_level)

    engine = build_engine(settings.async_database_url)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await logger.ainfo(
            "service_startup",
            service=settings.app_name,
            environment=settings.environment,
            version=settings.version,
        )
        yield
        await engine.dispose()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Session cookies need credentialed CORS, so origins are listed explicitly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_origin_regex=r"https://.*\.vercel\.app|https://.*\.netlify\.app|https://.*\.onrender\.com",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)

    @app.middleware("http")
    async def correlation_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid4()))
        bind_contextvars(
            request_id=request_id,
            path=str(request.url.path),
            method=request.method,
        )
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_contextvars()

    return app


app = create_app()
