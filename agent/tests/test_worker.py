"""Tests for the serial worker."""

import threading

import pytest

from shipper_core.errors import ShipperError
from shipper_core.worker import SerialWorker


@pytest.fixture
def worker():
    w = SerialWorker()
    w.start()
    yield w
    w.stop(timeout=5)


def test_runs_tasks_in_submission_order(worker):
    seen = []
    futures = [worker.submit(seen.append, i) for i in range(50)]
    for f in futures:
        f.result(timeout=5)
    assert seen == list(range(50))


def test_all_tasks_run_on_one_thread(worker):
    names = set()
    futures = [worker.submit(lambda: names.add(threading.current_thread().name)) for _ in range(10)]
    for f in futures:
        f.result(timeout=5)
    assert names == {"logship-worker"}


def test_concurrent_submitters_are_serialized(worker):
    counter = {"n": 0}

    def bump():
        value = counter["n"]
        counter["n"] = value + 1

    futures = []
    lock = threading.Lock()

    def producer():
        for _ in range(100):
            f = worker.submit(bump)
            with lock:
                futures.append(f)

    threads = [threading.Thread(target=producer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    for f in futures:
        f.result(timeout=5)
    assert counter["n"] == 800


def test_task_exception_lands_in_future_and_worker_keeps_going(worker):
    def boom():
        raise RuntimeError("bad task")

    with pytest.raises(RuntimeError):
        worker.submit(boom).result(timeout=5)
    assert worker.submit(lambda: 42).result(timeout=5) == 42


def test_stop_drains_pending_work_then_rejects():
    w = SerialWorker()
    w.start()
    seen = []
    for i in range(20):
        w.submit(seen.append, i)
    w.stop(timeout=5)

    assert seen == list(range(20))
    assert not w.running
    with pytest.raises(ShipperError):
        w.submit(seen.append, 99)


def test_submit_before_start_rejected():
    with pytest.raises(ShipperError):
        SerialWorker().submit(lambda: None)
