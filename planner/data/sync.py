"""Background execution of persistence work.

Writes are fire-and-forget from the caller's side. With ``serialize`` on, work
submitted under the same key (``"categories"`` or a day key) runs strictly in
submission order; different keys may run in parallel.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait

logger = logging.getLogger(__name__)


class SyncIndicator:
    """Count of in-flight remote operations, usable as a context manager."""

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    def __enter__(self):
        with self._lock:
            self._count += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        with self._lock:
            self._count = max(0, self._count - 1)
        return False

    @property
    def active(self):
        with self._lock:
            return self._count

    @property
    def is_syncing(self):
        return self.active > 0


class WriteQueue:
    def __init__(self, serialize=True, max_workers=4):
        self.serialize = serialize
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="planner-sync")
        self._lock = threading.Lock()
        self._tails = {}
        self._pending = set()

    def submit(self, key, fn, *args, **kwargs):
        with self._lock:
            previous = self._tails.get(key) if self.serialize else None
            future = self._executor.submit(self._run, previous, key, fn, args, kwargs)
            self._pending.add(future)
            if self.serialize:
                self._tails[key] = future
        future.add_done_callback(lambda done: self._forget(key, done))
        return future

    def _run(self, previous, key, fn, args, kwargs):
        if previous is not None:
            wait([previous])
        try:
            return fn(*args, **kwargs)
        except Exception:
            logger.exception("Background task for %s failed", key)
            return None

    def _forget(self, key, future):
        with self._lock:
            self._pending.discard(future)
            if self._tails.get(key) is future:
                del self._tails[key]

    @property
    def pending(self):
        with self._lock:
            return len(self._pending)

    def drain(self, timeout=None):
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                snapshot = list(self._pending)
            if not snapshot:
                return True
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            _, not_done = wait(snapshot, timeout=remaining)
            if not_done and deadline is not None and time.monotonic() >= deadline:
                return False

    def shutdown(self, wait_for_pending=True):
        self._executor.shutdown(wait=wait_for_pending)
