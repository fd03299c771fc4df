import logging
import threading
import time

logger = logging.getLogger(__name__)


class CircuitBreaker:
    """Refuses calls for `reset_seconds` once `max_failures` calls in a row have failed."""

    def __init__(self, name: str, max_failures: int, reset_seconds: int) -> None:
        self.name = name
        self.max_failures = max(int(max_failures), 1)
        self.reset_seconds = max(int(reset_seconds), 1)
        self._failures = 0
        self._open_until = 0.0
        self._lock = threading.Lock()

    def allow(self) -> bool:
        with self._lock:
            return time.monotonic() >= self._open_until

    def record_success(self) -> None:
        with self._lock:
            self._failures = 0
            self._open_until = 0.0

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            if self._failures >= self.max_failures:
                # a failed trial call after the pause reopens immediately
                self._open_until = time.monotonic() + self.reset_seconds
                logger.warning("circuit_opened name=%s failures=%s", self.name, self._failures)
