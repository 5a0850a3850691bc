"""Retry helpers with exponential backoff (stdlib only)."""
from __future__ import annotations

import random
import time
from typing import Callable, Tuple, Type, TypeVar

from jobhub.log import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def call_with_retry(
    fn: Callable[[], T],
    *,
    max_attempts: int = 1,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] | None = None,
) -> T:
    """Call *fn* until it succeeds or *max_attempts* is used up.

    The last exception is re-raised unchanged. ``max_attempts`` below 1 is
    treated as a single attempt.
    """
    attempts = max(1, max_attempts)
    name = getattr(getattr(fn, "func", fn), "__qualname__", repr(fn))
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retryable as exc:
            if attempt == attempts:
                if attempts > 1:
                    log.error("%s failed after %d attempts: %s", name, attempts, exc)
                raise
            delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
            if jitter:
                delay *= 0.5 + random.random()
            log.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs",
                name,
                attempt,
                attempts,
                exc,
                delay,
            )
            (sleep or time.sleep)(delay)
    raise RuntimeError("unreachable")
