"""Bounded, sequential retry combinator.

`retry_until` separates the pure check (`value -> result`) from the corrective
action (`value, result -> new value`), so loops like validate -> fix ->
re-validate carry no hidden mutable state and can be tested in isolation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class BackoffPolicy:
    """Fixed delay between corrective actions (no jitter)."""

    delay_sec: float = 0.0
    multiplier: float = 1.0

    def delay_for(self, attempt: int) -> float:
        if attempt <= 1 or self.delay_sec <= 0:
            return 0.0
        return self.delay_sec * (self.multiplier ** (attempt - 2))


NO_BACKOFF = BackoffPolicy()


@dataclass
class RetryOutcome(Generic[T, R]):
    value: T
    result: R
    ok: bool
    # Number of corrective actions performed
    attempts: int
    history: list[R] = field(default_factory=list)


async def _maybe_await(value: R | Awaitable[R]) -> R:
    if inspect.isawaitable(value):
        return await value
    return value


async def retry_until(
    value: T,
    check: Callable[[T], R | Awaitable[R]],
    action: Callable[[T, R], Awaitable[T]],
    *,
    accept: Callable[[R], bool],
    attempts: int,
    policy: BackoffPolicy = NO_BACKOFF,
) -> RetryOutcome[T, R]:
    """Check `value`; while not accepted and attempts remain, act and re-check.

    Exceptions raised by `check` or `action` propagate to the caller.
    """
    if attempts < 0:
        raise ValueError("attempts must be >= 0")

    result = await _maybe_await(check(value))
    history = [result]
    used = 0
    while not accept(result) and used < attempts:
        used += 1
        delay = policy.delay_for(used)
        if delay:
            await asyncio.sleep(delay)
        logger.debug("retry_until: corrective attempt %s/%s", used, attempts)
        value = await action(value, result)
        result = await _maybe_await(check(value))
        history.append(result)

    return RetryOutcome(
        value=value, result=result, ok=accept(result), attempts=used, history=history
    )


__all__ = ["BackoffPolicy", "NO_BACKOFF", "RetryOutcome", "retry_until"]
