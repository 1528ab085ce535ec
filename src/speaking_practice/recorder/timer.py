from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 0.25


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as zero-padded ``MM:SS``."""
    total = max(0, int(math.floor(seconds)))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def round_seconds(seconds: float) -> int:
    """Round half up to whole seconds."""
    return max(0, int(math.floor(seconds + 0.5)))


class ElapsedTicker:
    """Periodically pushes the formatted elapsed time to ``on_tick``.

    ``stop()`` and ``cancel()`` are idempotent; the background task is always
    cancelled before they return.
    """

    def __init__(
        self,
        on_tick: Callable[[str], None],
        *,
        interval: float = TICK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._clock = clock
        self._started_at: Optional[float] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._last_elapsed = 0.0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        # monotonic clocks never go backwards, but an injected clock might
        self._last_elapsed = max(self._last_elapsed, self._clock() - self._started_at)
        return self._last_elapsed

    def start(self) -> None:
        self.cancel()
        self._started_at = self._clock()
        self._last_elapsed = 0.0
        self._on_tick(format_elapsed(0))
        self._task = asyncio.get_running_loop().create_task(self._run(), name="recorder-elapsed-ticker")

    def stop(self) -> int:
        """Cancel ticking and return the elapsed time rounded to whole seconds."""
        elapsed = self.elapsed()
        self.cancel()
        self._started_at = None
        return round_seconds(elapsed)

    def cancel(self) -> None:
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                self._on_tick(format_elapsed(self.elapsed()))
        except asyncio.CancelledError:
            logger.debug("recorder.ticker.cancelled")
            raise
