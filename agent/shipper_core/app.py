"""
LogAgent: composes store, queue, delivery client, worker, and scheduler.

Threads:
  caller threads      log() only tags the record and hands it off
  logship-worker      every queue mutation and every POST, in order
  logship-scheduler   wakes every batch interval and queues a flush cycle

A flush cycle (snapshot, send, acknowledge) is a single worker task, so a
record handed off while a POST is in flight is persisted after the cycle
and cannot be removed by that cycle's acknowledgment.
"""

import threading

from .config import log, AgentSettings
from .delivery import DeliveryClient, DeliveryState
from .errors import ShipperError
from .record import LogRecord
from .scheduler import FlushScheduler
from .shipper import ShipperQueue
from .store import JsonFileStore
from .worker import SerialWorker
from .constants import DEFAULT_SEVERITY


class LogAgent:
    """
    The shipping agent. Build it once at the composition root and pass it
    to whatever needs to log; start() begins the periodic flush.
    """

    def __init__(self, settings: AgentSettings, store=None, session=None):
        self.settings = settings
        self._store = store if store is not None else JsonFileStore(settings.store_path)
        self._queue = ShipperQueue(self._store)
        self._delivery = DeliveryClient(
            settings.endpoint,
            session=session,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            headers=settings.headers,
        )
        self._worker = SerialWorker()
        self._scheduler = FlushScheduler(settings.batch_interval, self._on_tick)
        self._flush_guard = threading.Lock()
        self._flush_queued = False       # a cycle is queued or running; guarded by _flush_guard

    # ─── Lifecycle ───────────────────────────────────────────

    def start(self):
        self._worker.start()
        self._scheduler.start()
        log.info(
            "Log agent started (endpoint=%s, interval=%ss, pending=%d)",
            self.settings.endpoint, self.settings.batch_interval, self._queue.pending,
        )
        return self

    def stop(self, timeout=None):
        """Stop ticking, persist everything already handed off, then exit. No final flush."""
        self._scheduler.stop(timeout)
        self._worker.stop(timeout)
        self._delivery.close()
        log.info("Log agent stopped (pending=%d)", self._queue.pending)

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    # ─── Logging ─────────────────────────────────────────────

    def log(self, short_message, full_message=None, severity=DEFAULT_SEVERITY, extensions=None):
        """
        Record one event. Returns a Future that resolves once the record is
        durable; callers normally ignore it. Raises InvalidRecord for a
        mistyped fixed field and UnsupportedFieldType for an extension value
        outside str/int/float/bool. Nothing is enqueued in either case.
        """
        record = LogRecord.create(
            short_message,
            full_message=full_message,
            severity=severity,
            extensions=extensions,
            host=self.settings.host,
        )
        try:
            return self._worker.submit(self._queue.enqueue, record)
        except ShipperError as e:
            log.warning("Dropped log %r: %s", short_message[:80], e)
            return None

    # ─── Flushing ────────────────────────────────────────────

    def _on_tick(self):
        self.flush_now()

    def flush_now(self):
        """
        Queue a flush cycle. Returns a Future of the cycle's DeliveryState, or
        None when a cycle is already queued or running.
        """
        with self._flush_guard:
            if self._flush_queued:
                log.info("Flush skipped, previous cycle still in flight")
                return None
            self._flush_queued = True
        try:
            future = self._worker.submit(self._flush_cycle)
        except ShipperError as e:
            self._end_flush()
            log.warning("Flush not scheduled: %s", e)
            return None
        future.add_done_callback(self._on_flush_done)
        return future

    def _on_flush_done(self, future):
        # A cycle cancelled while queued never runs its own cleanup.
        if future.cancelled():
            self._end_flush()

    def _end_flush(self):
        with self._flush_guard:
            self._flush_queued = False

    def _flush_cycle(self) -> DeliveryState:
        try:
            batch = self._queue.flush(self.settings.max_batch_size)
            if not batch:
                log.debug("Nothing to send")
                return DeliveryState.IDLE

            state = self._delivery.deliver(batch)
            if state is DeliveryState.ACKNOWLEDGED:
                removed = self._queue.acknowledge(batch)
                log.info("Removed %d acknowledged record(s), %d pending", removed, self._queue.pending)
            return state
        finally:
            self._end_flush()

    # ─── Accessors ───────────────────────────────────────────

    def pending(self):
        """
        Future of the pending snapshot, read on the worker after earlier
        hand-offs. None once the agent is stopped.
        """
        try:
            return self._worker.submit(self._queue.flush)
        except ShipperError as e:
            log.warning("Pending snapshot unavailable: %s", e)
            return None

    @property
    def delivery_state(self) -> DeliveryState:
        return self._delivery.state
