"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from debt_ledger.api.dependencies import get_request_id
from debt_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from debt_ledger.api.v1 import auth, banks, debts, notifications, payments, statistics
from debt_ledger.domain.exceptions import (
    AuthFailure,
    ConflictError,
    DomainException,
    NotFoundError,
    StorageFailure,
    ValidationFailure,
)
from debt_ledger.infrastructure.database.session import Database
from debt_ledger.infrastructure.observability.logging import setup_logging
from debt_ledger.config import settings

# Setup structured logging
setup_logging()

API_PREFIX = "/api"

STATUS_BY_ERROR = (
    (ValidationFailure, 400),
    (AuthFailure, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageFailure, 500),
)


def status_for(exc: DomainException) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Map domain errors to HTTP; storage details never reach the client"""
    status_code = status_for(exc)
    request_id = get_request_id(request)

    if status_code >= 500:
        logging.error(f"Request failed: {exc}", extra={"request_id": request_id})
        return JSONResponse(status_code=status_code, content={"detail": "Internal server error"})

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"detail": str(exc)}, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(database: Database | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    The database handle is created here unless one is passed in, kept on
    app.state for the request dependencies, and disposed on shutdown.
    """
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables_on_startup:
            database.create_all()
        yield
        database.dispose()

    app = FastAPI(
        title="Debt Ledger",
        description="Personal debt tracking with an atomic payment ledger",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.database = database

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        try:
            database.ping()
        except SQLAlchemyError as e:
            logging.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unavailable", "service": settings.service_name},
            )
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
    app.include_router(debts.router, prefix=f"{API_PREFIX}/debts", tags=["debts"])
    app.include_router(payments.router, prefix=f"{API_PREFIX}/payments", tags=["payments"])
    app.include_router(statistics.router, prefix=f"{API_PREFIX}/statistics", tags=["statistics"])
    app.include_router(notifications.router, prefix=f"{API_PREFIX}/notifications", tags=["notifications"])
    app.include_router(banks.router, prefix=f"{API_PREFIX}/banks", tags=["banks"])

    return app


app = create_app()
