"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (logging, database engine).
Middleware, CORS, exception handlers and routers are all registered here.

Exception handlers are where the error taxonomy (errors.py) meets HTTP.
Every AuthError becomes the same bare 401 so clients cannot tell an
unknown account from a bad password, or an expired token from a forged
one. Only the logs keep the difference.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from odyssey import __version__
from odyssey.api import api_router
from odyssey.config import settings
from odyssey.errors import (
    AuthError,
    DuplicateIdentity,
    Forbidden,
    NotFound,
    ValidationFailed,
)
from odyssey.log import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    configure_logging()
    logger.info(
        "odyssey.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        token_ttl_seconds=settings.token_ttl_seconds,
    )

    yield

    logger.info("odyssey.shutdown")
    from odyssey.db.engine import engine
    await engine.dispose()


# ─── Error mapping ───────────────────────────────────────


async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
    logger.info("auth.rejected", error=type(exc).__name__)
    return JSONResponse(
        status_code=401,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _status_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(DuplicateIdentity, _status_handler(409))
    app.add_exception_handler(Forbidden, _status_handler(403))
    app.add_exception_handler(NotFound, _status_handler(404))
    app.add_exception_handler(ValidationFailed, _status_handler(400))


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Odyssey",
        description="Travel journal sharing API",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler

    from odyssey.middleware.request_id import RequestIdMiddleware
    from odyssey.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)
    return app


# Default app instance (used by uvicorn: odyssey.main:app)
app = create_app()
