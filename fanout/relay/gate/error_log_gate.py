import threading
import time
from typing import Callable, Dict


class ErrorLogGate:
    """
    Per-key log throttle.

    The first call for a key always passes. Later calls pass only once
    strictly more than ``minimum_interval`` seconds have elapsed since the
    last call that passed for the same key.

    Usage:
        gate = ErrorLogGate(minimum_interval=5.0)

        if gate.should_log(destination.label):
            await logger.log(...)
    """

    def __init__(
        self,
        minimum_interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._minimum_interval = minimum_interval
        self._clock = clock
        self._last_log_by_key: Dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def minimum_interval(self) -> float:
        return self._minimum_interval

    def should_log(self, key: str) -> bool:
        now = self._clock()

        with self._lock:
            last_log = self._last_log_by_key.get(key)

            if last_log is None or now - last_log > self._minimum_interval:
                self._last_log_by_key[key] = now
                return True

        return False
