"""Wall-clock time source"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Current time in seconds since the epoch."""


class SystemClock:
    def now(self) -> float:
        return time.time()
