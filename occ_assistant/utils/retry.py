"""Backoff policies for outbound calls."""
from typing import Callable, Optional, Tuple, Type
from functools import wraps
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
import httpx
from occ_assistant.analytics.logger import get_logger
from occ_assistant.utils.config import settings
from occ_assistant.utils.errors import OCCError

logger = get_logger("retry")

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    ConnectionError,
    TimeoutError,
)


class RetryConfig:
    """Attempts, wait bounds and which exceptions are worth another try."""

    def __init__(
        self,
        max_attempts: int = 3,
        initial_wait: float = 1.0,
        max_wait: float = 10.0,
        exponential_base: float = 2.0,
        retry_on: Optional[Tuple[Type[BaseException], ...]] = None,
        should_retry: Optional[Callable[[BaseException], bool]] = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.initial_wait = initial_wait
        self.max_wait = max_wait
        self.exponential_base = exponential_base
        self.retry_on = tuple(retry_on) if retry_on else TRANSIENT_ERRORS
        self.should_retry = should_retry

    def is_retryable(self, exception: BaseException) -> bool:
        if not isinstance(exception, self.retry_on):
            return False
        return self.should_retry(exception) if self.should_retry else True


def should_retry_occ_error(exception: BaseException) -> bool:
    """Transport failures, 5xx and 429 are transient; other client errors are final."""
    if not isinstance(exception, OCCError):
        return True
    status_code = exception.status_code
    return status_code is None or status_code >= 500 or status_code == 429


def async_retry(config: Optional[RetryConfig] = None):
    """Retry an async callable with exponential backoff.

    The last exception is re-raised unchanged once attempts run out.
    """
    config = config or RetryConfig()

    def decorator(func: Callable) -> Callable:
        def log_retry(retry_state):
            logger.warning(
                f"Retrying {func.__qualname__} after {retry_state.outcome.exception()} "
                f"(attempt {retry_state.attempt_number}/{config.max_attempts})"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            retrying = AsyncRetrying(
                stop=stop_after_attempt(config.max_attempts),
                wait=wait_exponential(
                    multiplier=config.initial_wait,
                    max=config.max_wait,
                    exp_base=config.exponential_base,
                ),
                retry=retry_if_exception(config.is_retryable),
                before_sleep=log_retry,
                reraise=True,
            )
            return await retrying(func, *args, **kwargs)

        return wrapper
    return decorator


# Commerce platform calls
occ_retry = async_retry(
    RetryConfig(
        max_attempts=settings.occ_max_retries,
        initial_wait=1.0,
        max_wait=10.0,
        retry_on=(OCCError,),
        should_retry=should_retry_occ_error,
    )
)

# Model provider calls; longer backoff for rate limits
llm_retry = async_retry(
    RetryConfig(
        max_attempts=settings.llm_max_retries,
        initial_wait=2.0,
        max_wait=30.0,
    )
)
