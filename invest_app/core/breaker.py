import logging
import time
from typing import Any, Awaitable, Callable, Tuple, Type

from fastapi import HTTPException

from .exceptions import DomainError

logger = logging.getLogger(__name__)


class CircuitOpenError(Exception):
    pass


class CircuitBreaker:
    def __init__(
        self,
        name: str = "default",
        failure_threshold: int = 3,
        base_recovery_time: int = 10,
        max_recovery_time: int = 60,
        ignored_exceptions: Tuple[Type[BaseException], ...] = (
            DomainError,
            HTTPException,
        ),
    ):
        self.name = name
        self.failure_count = 0
        self.failure_threshold = failure_threshold
        self.base_recovery_time = base_recovery_time
        self.max_recovery_time = max_recovery_time
        self.ignored_exceptions = ignored_exceptions
        self.last_failure_time = 0.0
        self.state = "CLOSED"

    @property
    def current_recovery_time(self):
        return min(
            self.base_recovery_time
            * (2 ** max(self.failure_count - self.failure_threshold, 0)),
            self.max_recovery_time,
        )

    def _open(self):
        self.state = "OPEN"
        self.last_failure_time = time.time()
        logger.warning(
            f"Circuit '{self.name}' opened after {self.failure_count} failures."
        )

    def _half_open(self):
        self.state = "HALF_OPEN"
        logger.info(f"Circuit '{self.name}' half-open: testing...")

    def _close(self):
        if self.state != "CLOSED":
            logger.info(f"Circuit '{self.name}' closed: stable again.")
        self.state = "CLOSED"
        self.failure_count = 0

    def reset(self):
        self.state = "CLOSED"
        self.failure_count = 0
        self.last_failure_time = 0.0

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        now = time.time()

        if self.state == "OPEN":
            cooldown = self.current_recovery_time
            if now - self.last_failure_time < cooldown:
                raise CircuitOpenError(
                    f"CircuitBreaker '{self.name}': still open, retry after "
                    f"{cooldown - (now - self.last_failure_time):.1f}s"
                )
            self._half_open()

        try:
            result = await func(*args, **kwargs)
        except self.ignored_exceptions:
            # domain errors do not count as failures
            self._close()
            raise
        except Exception as e:
            self.failure_count += 1
            logger.error(
                f"CircuitBreaker '{self.name}' call failed ({self.failure_count}): {e}"
            )
            if self.state == "HALF_OPEN" or self.failure_count >= self.failure_threshold:
                self._open()
            raise

        self._close()
        return result


breaker = CircuitBreaker(name="services", failure_threshold=3, base_recovery_time=10)
integrations_breaker = CircuitBreaker(
    name="integrations", failure_threshold=3, base_recovery_time=10
)
