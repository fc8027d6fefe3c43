"""
SerialWorker: one background thread that runs submitted work in order.

Callers on any thread put work on the inbox and get a Future back. Because
exactly one thread drains the inbox, every queue mutation and every send
runs one after another with no lock around shared state.
"""

import queue
import threading
from concurrent.futures import Future

from .config import log
from .errors import ShipperError

_STOP = object()


class SerialWorker:
    def __init__(self, name="logship-worker"):
        self._name = name
        self._inbox = queue.Queue()
        self._thread = None
        self._accepting = False
        self._lock = threading.Lock()   # guards _accepting vs. the stop marker

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        with self._lock:
            if self._thread is not None:
                return
            self._accepting = True
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def submit(self, fn, *args) -> Future:
        """Queue fn(*args) behind all earlier work. Never blocks."""
        future = Future()
        with self._lock:
            if not self._accepting:
                raise ShipperError("Worker is not running")
            self._inbox.put((future, fn, args))
        return future

    def stop(self, timeout=None):
        """Finish everything already submitted, then exit the thread."""
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            self._inbox.put(_STOP)
        self._thread.join(timeout)
        if self._thread.is_alive():
            log.warning("Worker did not finish within %ss", timeout)

    def _run(self):
        while True:
            item = self._inbox.get()
            if item is _STOP:
                break
            future, fn, args = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args)
            except Exception as e:
                log.error("Worker task %s failed: %s", getattr(fn, "__name__", fn), e, exc_info=True)
                future.set_exception(e)
            else:
                future.set_result(result)
