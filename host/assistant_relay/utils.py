# assistant_relay/utils.py
"""
Utility functions for the relay bot
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class PollPolicy:
    """Bounded polling: wait `interval` seconds before each of `max_attempts` checks"""
    max_attempts: int = 5
    interval: float = 8.0

    @property
    def ceiling(self) -> float:
        return self.max_attempts * self.interval


async def poll_until(
    check: Callable[[], Awaitable[T]],
    classify: Callable[[T], Optional[R]],
    policy: PollPolicy,
    sleep: Sleep = asyncio.sleep,
) -> Optional[R]:
    """Poll `check` until `classify` returns a result.

    Returns None when every attempt came back non-terminal. Exceptions from
    `check` are not retried.
    """
    for attempt in range(1, policy.max_attempts + 1):
        await sleep(policy.interval)
        value = await check()
        result = classify(value)
        if result is not None:
            return result
        logger.debug(f"Poll attempt {attempt}/{policy.max_attempts}: {value}")
    return None
