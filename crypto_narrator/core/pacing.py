"""Fixed-interval gate used to pace outbound posts."""

import time
from typing import Callable, Optional

from crypto_narrator.core.logger import logger


class IntervalGate:
    """Ensures consecutive passes through :meth:`wait` are at least ``interval_s`` apart.

    The first pass never sleeps. ``clock`` and ``sleep`` are injectable so the
    gate can be driven by a fake clock in tests.
    """

    def __init__(
        self,
        interval_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_s < 0:
            raise ValueError(f"interval_s must be >= 0, got {interval_s}")
        self.interval_s = interval_s
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def wait(self) -> float:
        """Block until the interval since the previous pass has elapsed.

        Returns:
            float: Seconds slept (0.0 when no wait was needed).
        """
        slept = 0.0
        if self._last is not None:
            remaining = self.interval_s - (self._clock() - self._last)
            if remaining > 0:
                logger.debug(f"IntervalGate: sleeping {remaining:.2f}s")
                self._sleep(remaining)
                slept = remaining
        self._last = self._clock()
        return slept

    def reset(self) -> None:
        self._last = None
