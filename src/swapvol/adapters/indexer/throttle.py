import random
import time
from typing import Callable


class RequestThrottle:
    """Spaces calls at least 1/requests_per_sec seconds apart."""

    def __init__(
        self,
        requests_per_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if requests_per_sec <= 0:
            raise ValueError("requests_per_sec must be > 0")
        self._min_interval = 1.0 / requests_per_sec
        self._clock = clock
        self._sleep = sleep
        self._last_call = None

    def wait(self) -> None:
        if self._last_call is not None:
            remaining = self._min_interval - (self._clock() - self._last_call)
            if remaining > 0:
                self._sleep(remaining)
        self._last_call = self._clock()


def backoff_delay(attempt: int, base: float = 0.5, cap: float = 8.0) -> float:
    # full exponential step with +/-30% jitter
    delay = min(cap, base * (2 ** attempt))
    return delay * (0.7 + random.random() * 0.6)
