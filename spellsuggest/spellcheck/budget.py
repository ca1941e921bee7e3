from __future__ import annotations

import time
from typing import Callable


class Deadline:
    """Soft wall-clock budget checked cooperatively by long scans.

    A budget of ``None`` never expires. Once a deadline reports expiry it
    keeps reporting it, so nested scans sharing one deadline stop together.
    """

    def __init__(self, budget_ms: float | None, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.budget_ms = budget_ms
        self._clock = clock
        self._started = clock()
        self._expired = False

    def elapsed_ms(self) -> float:
        return (self._clock() - self._started) * 1000.0

    def expired(self) -> bool:
        if self._expired:
            return True
        if self.budget_ms is None:
            return False
        if self.elapsed_ms() > self.budget_ms:
            self._expired = True
        return self._expired

    @property
    def was_hit(self) -> bool:
        return self._expired
