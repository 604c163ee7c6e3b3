"""Sliding-window admission control for outbound LLM calls."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from domain.models import RateLimiterStats
from domain.ports import ClockPort, LoggerPort

SleepFn = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Admit at most ``max_requests`` calls within any trailing ``window_ms``.

    Prune, check and append happen under one lock. A caller that has to wait
    keeps holding the lock, so a burst is admitted one caller at a time in
    arrival order.
    """

    def __init__(
        self,
        *,
        clock: ClockPort,
        logger: LoggerPort,
        max_requests: int = 40,
        window_ms: int = 60_000,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._clock = clock
        self._logger = logger
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._sleep = sleep
        self._requests: list[float] = []
        self._lock = asyncio.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = self._now_ms()
                self._prune(now)
                if len(self._requests) < self._max_requests:
                    self._requests.append(now)
                    return

                wait_ms = self._window_ms - (now - self._requests[0])
                self._logger.info(
                    "rate_limit_wait",
                    wait_ms=round(wait_ms),
                    requests_in_window=len(self._requests),
                )
                await self._sleep(max(wait_ms, 0) / 1000)

    def can_acquire(self) -> bool:
        self._prune(self._now_ms())
        return len(self._requests) < self._max_requests

    def window(self) -> list[float]:
        """Timestamps (ms) currently inside the trailing window."""
        self._prune(self._now_ms())
        return list(self._requests)

    def get_stats(self) -> RateLimiterStats:
        self._prune(self._now_ms())
        used = len(self._requests)
        return RateLimiterStats(
            requests_in_window=used,
            max_requests=self._max_requests,
            available_requests=self._max_requests - used,
            window_ms=self._window_ms,
            utilization_percent=used / self._max_requests * 100,
        )

    def reset(self) -> None:
        self._requests = []

    def _prune(self, now: float) -> None:
        self._requests = [ts for ts in self._requests if now - ts < self._window_ms]

    def _now_ms(self) -> float:
        return self._clock.now().timestamp() * 1000
