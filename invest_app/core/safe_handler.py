import logging
from functools import wraps

from fastapi import HTTPException, Request

from .exceptions import DomainError
from .friendly_msg import get_friendly_message

logger = logging.getLogger(__name__)


def _request_context(request: Request | None) -> str:
    if request is None:
        return "no-request"
    client_ip = request.client.host if request.client else "unknown"
    trace_id = request.headers.get("X-Request-ID", "none")
    return f"TraceID={trace_id} | {request.method} {request.url.path} from {client_ip}"


def safe_handler(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        request: Request | None = None
        for arg in list(args) + list(kwargs.values()):
            if isinstance(arg, Request):
                request = arg
                break

        try:
            return await func(*args, **kwargs)
        except DomainError as e:
            logger.warning(
                f"[{type(e).__name__}] {_request_context(request)}: {e.message}"
            )
            raise
        except HTTPException as e:
            logger.warning(
                f"[HTTPException] {e.status_code} {_request_context(request)}: {e.detail}"
            )
            raise
        except Exception as e:
            logger.error(
                f"[Unhandled Error] in {func.__name__} | {_request_context(request)} | "
                f"Error: {e}",
                exc_info=True,
            )
            raise HTTPException(status_code=500, detail=get_friendly_message(e))

    return wrapper
