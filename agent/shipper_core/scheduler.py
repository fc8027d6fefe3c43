"""
FlushScheduler: fires a tick every `interval` seconds on a background thread.

The first tick comes one full interval after start(), never immediately.
Ticking stops on stop().
"""

import threading

from .config import log


class FlushScheduler:
    def __init__(self, interval, on_tick, name="logship-scheduler"):
        self.interval = interval
        self._on_tick = on_tick
        self._name = name
        self._stop = threading.Event()
        self._thread = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        log.info("Flush scheduler started (interval=%ss)", self.interval)

    def stop(self, timeout=None):
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _run(self):
        while not self._stop.wait(self.interval):
            self.ticks += 1
            try:
                self._on_tick()
            except Exception as e:
                log.error("Flush tick error: %s", e, exc_info=True)
