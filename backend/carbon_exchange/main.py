"""Carbon Exchange API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CarbonExchangeError -> plain-text responses
    - CORS configured from settings (not hardcoded)
    - The ledger store is built once per app and injected into every service;
      there is no module-level store
    - Store initialized (schema, seed) on startup and closed on shutdown via lifespan
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from carbon_exchange.api.error_handlers import register_error_handlers
from carbon_exchange.api.routes import auth, credits, health, projects, trade
from carbon_exchange.config import Settings, get_settings
from carbon_exchange.core.repository_protocols import LedgerStore
from carbon_exchange.infrastructure.database import DatabaseSessionManager
from carbon_exchange.infrastructure.memory_store import MemoryLedgerStore
from carbon_exchange.infrastructure.observability import setup_logging
from carbon_exchange.infrastructure.session_store import SessionStore
from carbon_exchange.infrastructure.sql_store import SqlLedgerStore
from carbon_exchange.services.auth import AuthService
from carbon_exchange.services.settlement import SettlementService

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> LedgerStore:
    """SQL store when DATABASE_URL is set, in-memory store otherwise."""
    if settings.database_url:
        db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return SqlLedgerStore(db, initial_balance=settings.initial_balance)
    return MemoryLedgerStore(initial_balance=settings.initial_balance)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    await app.state.store.initialize(seed=settings.seed_projects)
    logger.info("Carbon Exchange API started")
    yield
    await app.state.store.close()
    logger.info("Carbon Exchange API shutting down")


def create_app(
    settings: Settings | None = None, store: LedgerStore | None = None,
) -> FastAPI:
    """Build the app with its own store, session store and services."""
    settings = settings or get_settings()
    store = store if store is not None else build_store(settings)

    app = FastAPI(
        title="Carbon Exchange API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.sessions = SessionStore(ttl_seconds=settings.session_ttl_seconds)
    app.state.settlement = SettlementService(store)
    app.state.auth = AuthService(store, app.state.sessions)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        """One line per /api request: method, path, status, duration."""
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            duration_ms = round((time.perf_counter() - start) * 1000)
            logger.info(
                f"{request.method} {path} {response.status_code} in {duration_ms}ms",
                extra={
                    "method": request.method, "path": path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
        return response

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(credits.router)
    app.include_router(trade.router)

    # Client build; mounted after API routes so /api/* takes precedence
    if os.path.isdir("static"):
        app.mount("/", StaticFiles(directory="static", html=True), name="static")

    return app


app = create_app()
