import logging

from fastapi import Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.asyncio import from_url

from .settings import settings

logger = logging.getLogger(__name__)


class RateLimitManager:
    def __init__(self):
        self.redis = None

    async def connect(self):
        if not settings.RATE_LIMIT_REDIS_URL:
            logger.info("RATE_LIMIT_REDIS_URL not set; rate limiting disabled.")
            return
        self.redis = from_url(
            settings.RATE_LIMIT_REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
        await FastAPILimiter.init(
            self.redis,
            identifier=self.user_or_ip,
            http_callback=self.limit_exceeded_callback,
        )
        logger.info("Rate limiter initialized.")

    async def close(self):
        if self.redis is not None:
            await FastAPILimiter.close()
            self.redis = None

    @staticmethod
    async def limit_exceeded_handler(request: Request, exc):
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "message": "Limit exceeded. Please try again later.",
            },
        )

    @staticmethod
    async def limit_exceeded_callback(request: Request, response: Response, pexpire: int):
        raise HTTPException(
            status_code=429,
            detail="Limit exceeded. Please try again later.",
            headers={"Retry-After": str(max(pexpire // 1000, 1))},
        )

    async def user_or_ip(self, request: Request) -> str:
        user = getattr(request.state, "user", None)
        user_id = getattr(user, "id", None)
        if user_id is not None:
            return f"user:{user_id}:{request.url.path}"

        if request.client and request.client.host:
            return f"ip:{request.client.host}:{request.url.path}"

        return "anonymous"


rate_limiter_manager = RateLimitManager()
rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES,
    seconds=settings.RATE_LIMIT_SECONDS,
    identifier=rate_limiter_manager.user_or_ip,
)


async def limit_requests(request: Request, response: Response):
    if FastAPILimiter.redis is None:
        return
    await rate_limiter(request, response)


rate_limit = Depends(limit_requests)
