from __future__ import annotations

import functools
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inbox_service.api.middleware.correlation_id import CorrelationIdMiddleware
from inbox_service.api.middleware.metrics import RequestTimingMiddleware
from inbox_service.api.v1.routers import (
    conversations,
    debug,
    health,
    messages,
    webhook,
    ws,
)
from inbox_service.application.exceptions import (
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from inbox_service.config import settings
from inbox_service.infrastructure.bus.redis_pubsub import (
    RedisPubSubNotifier,
    RedisPubSubSubscriber,
)
from inbox_service.infrastructure.db.database import Database
from inbox_service.infrastructure.ws.manager import ConnectionManager
from inbox_service.infrastructure.ws.notifier import LocalNotifier, dispatch

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    database = Database.from_settings(settings)
    try:
        await database.ping()
        if settings.DB_CREATE_SCHEMA:
            await database.create_schema()
    except StoreUnavailableError:
        logger.error("Cannot reach the message store at %s:%s", settings.DB_HOST, settings.DB_PORT)
        await database.dispose()
        raise
    app.state.database = database
    logger.info("Message store connected")

    manager = ConnectionManager()
    app.state.manager = manager
    app.state.redis = None
    subscriber: RedisPubSubSubscriber | None = None

    if settings.NOTIFIER_BACKEND == "redis":
        app.state.redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
        subscriber = RedisPubSubSubscriber(
            app.state.redis,
            settings.REDIS_PUBSUB_CHANNEL,
            functools.partial(dispatch, manager),
        )
        await subscriber.start()
        app.state.notifier = RedisPubSubNotifier(app.state.redis, settings.REDIS_PUBSUB_CHANNEL)
    else:
        app.state.notifier = LocalNotifier(manager)

    yield

    if subscriber is not None:
        await subscriber.stop()
    if app.state.redis is not None:
        await app.state.redis.aclose()
        logger.info("Redis connection pool closed")
    await database.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Inbox Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(webhook.router)
    app.include_router(debug.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(StoreUnavailableError)
    async def _store_unavailable(_req: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error("Store unavailable: %s", exc.detail)
        return JSONResponse(status_code=503, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def _unhandled(_req: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error")
        return JSONResponse(status_code=500, content={"detail": str(exc)})
