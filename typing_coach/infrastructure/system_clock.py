"""Wall-clock implementation of Clock."""

import time

from ..domain.interfaces.clock import Clock


class SystemClock(Clock):
    """Milliseconds since the Unix epoch from the system clock."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)
