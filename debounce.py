import threading
from typing import Callable, Optional


class Debouncer:
    """Call ``func`` only once calls have stopped for ``wait`` seconds.

    Each call cancels the pending one; the last arguments win.
    """

    def __init__(self, func: Callable, wait: float = 0.5):
        self.func = func
        self.wait = wait
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._args = ()
        self._kwargs = {}

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._args, self._kwargs = args, kwargs
            self._timer = threading.Timer(self.wait, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _take(self, generation=None):
        with self._lock:
            if self._timer is None:
                return None
            # A timer that lost the race against a newer call does nothing
            if generation is not None and generation != self._generation:
                return None
            self._timer.cancel()
            self._timer = None
            return self._args, self._kwargs

    def _fire(self, generation):
        pending = self._take(generation)
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    def flush(self):
        """Run the pending call now, if there is one."""
        pending = self._take()
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
