import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .cache import cache
from .get_db import async_engine
from .rabbitmq import rabbitmq
from .settings import settings
from .throttling import rate_limiter_manager

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    try:
        await rabbitmq.connect()
        await rabbitmq.declare_exchange_with_dlq(settings.RABBITMQ_MAIN_EXCHANGE)
    except Exception:
        logger.exception("RabbitMQ connection failed")

    try:
        await cache.connect()
    except Exception:
        logger.exception("Upstash Redis connection failed")

    try:
        await rate_limiter_manager.connect()
    except Exception:
        logger.exception("Rate limiter connection failed")

    logger.info("Application startup complete.")

    yield

    try:
        await rabbitmq.close()
    except Exception:
        logger.exception("Failed to close RabbitMQ connection")

    try:
        await rate_limiter_manager.close()
    except Exception:
        logger.exception("Failed to close rate limiter")

    await async_engine.dispose()
    logger.info("Application shutdown complete.")
