import threading


class ShutdownGuard:
    """Counter admitting exactly one shutdown.

    The first increment (0 -> 1) wins the right to tear down; every later
    increment only reports its sequence number.
    """

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def increment(self) -> int:
        """Atomically increment the counter and return the new value."""
        with self._lock:
            self._count += 1
            return self._count
