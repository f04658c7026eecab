"""
Countdown Timer
Cooperative one-second countdown that fires an expiry callback once
"""
from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

TICK_SECONDS = 1


class CountdownTimer:
    """
    Counts a time limit down one tick at a time.

    ``tick()`` is driven either by a test directly or by ``run()`` with an
    injected sleep function (``socketio.sleep`` in the web app). When the
    count reaches zero ``on_expire`` is called exactly once. ``cancel()``
    stops the chain; no tick has any effect afterwards.
    """

    def __init__(self, time_limit_minutes, on_expire=None) -> None:
        self._remaining = max(0, int(time_limit_minutes or 0) * 60)
        self._on_expire = on_expire
        self._cancelled = False
        self._expired = False

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return not (self._cancelled or self._expired)

    @property
    def expired(self) -> bool:
        return self._expired

    def tick(self) -> int:
        """Advance the countdown by one second and return what is left"""
        if not self.is_running:
            return self._remaining

        if self._remaining > 0:
            self._remaining -= 1

        if self._remaining == 0:
            self._expired = True
            if self._on_expire is not None:
                self._on_expire()
        return self._remaining

    def cancel(self) -> None:
        self._cancelled = True

    def run(self, sleep=time.sleep, on_tick=None) -> None:
        """Tick once per second until expired or cancelled"""
        while self.is_running:
            sleep(TICK_SECONDS)
            if not self.is_running:
                break
            remaining = self.tick()
            if on_tick is not None and not self._cancelled:
                on_tick(remaining)
        logger.debug("Countdown stopped with %d seconds left", self._remaining)
