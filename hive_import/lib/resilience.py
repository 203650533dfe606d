"""Retries for opening schema-source connections.

Only the connection step is retried. Catalog reads and statement
generation run exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import tenacity
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)

__all__ = ["RetryPolicy", "with_retry"]

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a connection attempt is made, and on which errors.

    Instances decorate a callable; each call then runs under a fresh
    ``tenacity.Retrying`` loop.
    """

    max_attempts: int = 3
    backoff_seconds: float = 1.0
    exponential: bool = True
    retry_exceptions: Tuple[Type[BaseException], ...] = (Exception,)

    def _wait(self) -> wait_base:
        if self.exponential:
            return tenacity.wait_exponential(multiplier=self.backoff_seconds, min=self.backoff_seconds)
        return tenacity.wait_fixed(self.backoff_seconds)

    def _retrying(self, name: str) -> tenacity.Retrying:
        def log_attempt(state: tenacity.RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            delay = state.next_action.sleep if state.next_action else 0
            logger.warning(
                "%s failed (attempt %d of %d): %s; next try in %.1fs",
                name,
                state.attempt_number,
                self.max_attempts,
                error,
                delay,
            )

        return tenacity.Retrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=tenacity.retry_if_exception_type(self.retry_exceptions),
            before_sleep=log_attempt,
            reraise=True,
        )

    def __call__(self, fn: F) -> F:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return self._retrying(fn.__name__)(fn, *args, **kwargs)

        return wrapper  # type: ignore


def with_retry(
    max_attempts: int = 3,
    backoff_seconds: float = 1.0,
    exponential: bool = True,
    retry_exceptions: Optional[Tuple[Type[BaseException], ...]] = None,
) -> RetryPolicy:
    """Build a :class:`RetryPolicy` for use as a decorator.

    ``retry_exceptions`` limits which errors are retried; anything else
    propagates on the first failure. After the last attempt the final
    error is re-raised as is.
    """
    return RetryPolicy(
        max_attempts=max_attempts,
        backoff_seconds=backoff_seconds,
        exponential=exponential,
        retry_exceptions=tuple(retry_exceptions or (Exception,)),
    )
