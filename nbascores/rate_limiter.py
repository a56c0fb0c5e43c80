import time
from typing import Optional


class RateLimiter:
    """Keeps at least ``delay`` seconds between consecutive calls to wait().

    The first call never waits.
    """

    def __init__(self, delay: float = 1.0):
        if delay < 0:
            raise ValueError(f"Delay must not be negative, got {delay}")
        self.delay = delay
        self.last_call: Optional[float] = None

    def wait(self):
        if self.last_call is not None:
            remaining = self.delay - (time.monotonic() - self.last_call)
            if remaining > 0:
                time.sleep(remaining)
        self.last_call = time.monotonic()
