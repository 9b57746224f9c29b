import math
import time
import threading
from concurrent.futures import ThreadPoolExecutor


class ThrottledThreadPoolExecutor(ThreadPoolExecutor):
    """Thread pool that also caps the rate of started tasks.

    ``max_workers`` bounds how many directory calls run at once, the token
    bucket (``requests`` per ``interval`` seconds) bounds how fast new ones
    start. A task only takes a token once it reaches a worker thread.
    """

    def __init__(self, max_workers=None, requests=100, interval=1, refill_factor=1):
        super().__init__(max_workers)
        self.interval = interval
        self.refill_factor = refill_factor
        self.rate = requests / interval
        self.capacity = requests
        self.tokens = self.capacity
        self.last_refill_time = time.monotonic()
        self._bucket_lock = threading.Lock()
        self._refilled = threading.Event()

    def _try_refill_tokens(self):
        now = time.monotonic()
        with self._bucket_lock:
            elapsed = now - self.last_refill_time
            if elapsed < self.interval / self.refill_factor:
                return False
            refill_amount = elapsed * self.rate
            if refill_amount < 1:
                return False
            self.tokens = min(self.capacity, math.floor(self.tokens + refill_amount))
            self.last_refill_time = now
            return True

    def _take_token(self):
        with self._bucket_lock:
            if self.tokens > 0:
                self.tokens -= 1
                return True
        return False

    def _acquire(self):
        while not self._take_token():
            if self._try_refill_tokens():
                self._refilled.set()
            else:
                self._refilled.wait(0.1)
                self._refilled.clear()

    def submit(self, fn, *args, **kwargs):
        def run_throttled():
            self._acquire()
            return fn(*args, **kwargs)

        return super().submit(run_throttled)
