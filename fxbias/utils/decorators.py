"""Utility decorators and retry policy for external collaborators."""
import asyncio
import functools
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from fxbias.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded attempts with fixed pauses (no exponential backoff).

    Args:
        max_attempts: Total attempts including the first one
        delay: Seconds to wait between attempts
        final_delay: Seconds to wait after the last failed attempt
    """

    max_attempts: int = 2
    delay: float = 1.0
    final_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0 or self.final_delay < 0:
            raise ValueError("delays must be non-negative")

    @classmethod
    def from_settings(
        cls, enabled: bool, attempts: int, delay: float = 1.0, final_delay: float = 0.0
    ) -> "RetryPolicy":
        """Build a policy from an `{enabled, attempts}` settings pair."""
        return cls(max_attempts=max(1, int(attempts)) if enabled else 1, delay=delay, final_delay=final_delay)

    async def run(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        exceptions: Tuple[Type[BaseException], ...] = (Exception,),
        label: Optional[str] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        **kwargs: Any,
    ) -> Any:
        """Await func until it succeeds or attempts run out; re-raises the last error."""
        sleep = sleep or asyncio.sleep
        name = label or getattr(func, "__name__", "call")
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await func(*args, **kwargs)
            except exceptions as e:
                if attempt == self.max_attempts:
                    logger.error(
                        f"{name} failed after {self.max_attempts} attempts",
                        extra={"error": str(e), "attempts": attempt},
                    )
                    if self.final_delay:
                        await sleep(self.final_delay)
                    raise
                logger.warning(
                    f"{name} failed (attempt {attempt}/{self.max_attempts}), retrying in {self.delay}s",
                    extra={"error": str(e), "delay": self.delay},
                )
                await sleep(self.delay)


def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,)
):
    """
    Retry decorator for coroutines with a fixed delay between attempts.

    Args:
        max_attempts: Maximum number of attempts
        delay: Delay between attempts in seconds
        exceptions: Tuple of exceptions to catch and retry

    Example:
        @retry(max_attempts=3, delay=1.0, exceptions=(httpx.HTTPError,))
        async def fetch_data():
            ...
    """
    policy = RetryPolicy(max_attempts=max_attempts, delay=delay)

    def decorator(func: Callable[..., Awaitable[Any]]):
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"retry() expects an async function, got {func.__name__}")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            return await policy.run(func, *args, exceptions=exceptions, **kwargs)

        return wrapper

    return decorator


def log_execution(log_args: bool = True, log_result: bool = False):
    """
    Decorator to log coroutine execution with timing.

    Args:
        log_args: Whether to log function arguments
        log_result: Whether to log function result
    """
    def decorator(func: Callable[..., Awaitable[Any]]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            func_name = func.__name__

            extra = {"function": func_name}
            if log_args:
                extra["function_args"] = str(args)[:100]  # Truncate long args
                extra["function_kwargs"] = str(kwargs)[:100]

            logger.debug(f"Starting {func_name}", extra=extra)

            try:
                result = await func(*args, **kwargs)
                execution_time = (time.time() - start_time) * 1000  # ms

                log_extra = {"function": func_name, "execution_time_ms": round(execution_time, 2)}
                if log_result:
                    log_extra["result"] = str(result)[:100]

                logger.debug(f"Completed {func_name}", extra=log_extra)
                return result
            except Exception as e:
                execution_time = (time.time() - start_time) * 1000
                logger.error(
                    f"Failed {func_name}",
                    extra={"function": func_name, "execution_time_ms": round(execution_time, 2), "error": str(e)}
                )
                raise

        return wrapper

    return decorator
