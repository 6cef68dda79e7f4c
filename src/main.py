"""FastAPI application entry point with lifespan management."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from src.api import (
    clients_router,
    dashboard_router,
    financials_router,
    health_router,
    reminders_router,
    reports_router,
    services_router,
    settings_router,
)
from src.api.middleware import RequestContextMiddleware
from src.core.config import settings
from src.core.database import create_engine, create_schema, create_session_factory
from src.core.logging import configure_logging, get_logger
from src.core.redis import create_redis_pool
from src.core.sentry import init_sentry
from src.reminders.notifier import ReminderNotifier, reminder_loop

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Initialize Sentry error tracking
        - Create database engine and session factory
        - Establish Redis connection pool
        - Start the periodic reminder check

    Shutdown:
        - Cancel the reminder check
        - Close Redis connections
        - Dispose database engine
    """
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        timezone=settings.business_timezone,
    )

    init_sentry()

    app.state.db_engine = create_engine()
    app.state.async_session = create_session_factory(app.state.db_engine)
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        await create_schema(app.state.db_engine)
    logger.info("Database engine created")

    app.state.redis = await create_redis_pool()
    logger.info("Redis pool created")

    app.state.reminder_task = None
    if settings.reminder_poll_seconds > 0:
        app.state.reminder_task = asyncio.create_task(
            reminder_loop(
                app.state.async_session,
                ReminderNotifier(app.state.redis),
                settings.reminder_poll_seconds,
            )
        )
        logger.info("Reminder loop started", interval=settings.reminder_poll_seconds)

    yield

    logger.info("Shutting down application")

    if app.state.reminder_task is not None:
        app.state.reminder_task.cancel()
        with suppress(asyncio.CancelledError):
            await app.state.reminder_task
        logger.info("Reminder loop stopped")

    await app.state.redis.aclose()
    logger.info("Redis pool closed")

    await app.state.db_engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="AF Clean",
    description="Client, appointment and cash-flow management for a cleaning service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health_router)
app.include_router(clients_router)
app.include_router(services_router)
app.include_router(financials_router)
app.include_router(settings_router)
app.include_router(dashboard_router)
app.include_router(reminders_router)
app.include_router(reports_router)
