import itertools
import threading


class IdGenerator:
    """
    Monotonically increasing integer ids.

    One instance is shared by every session-backed store in a process, so ids
    never collide across sessions.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return next(self._counter)
