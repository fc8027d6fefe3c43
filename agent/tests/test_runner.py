"""Tests for the runner entry point."""

import json
import threading

from shipper_core import runner
from shipper_core.store import JsonFileStore

from conftest import ENDPOINT


def test_missing_config_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setattr(runner, "setup_logging", lambda: None)
    monkeypatch.delenv("LOGSHIP_ENDPOINT", raising=False)
    assert runner.main(tmp_path / "absent.json") == 1


def test_runs_until_stopped_and_records_startup(tmp_path, monkeypatch):
    monkeypatch.setattr(runner, "setup_logging", lambda: None)
    for key in ("LOGSHIP_ENDPOINT", "LOGSHIP_STORE_PATH", "LOGSHIP_BATCH_INTERVAL"):
        monkeypatch.delenv(key, raising=False)
    store_path = tmp_path / "pending.json"
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "endpoint": ENDPOINT,
        "batchIntervalSec": 3600,
        "storePath": str(store_path),
    }))

    stop = threading.Event()
    stop.set()
    assert runner.main(config_path, stop_event=stop) == 0

    (obj,) = JsonFileStore(store_path).load()
    assert obj["short_message"] == "Log shipping agent started"
    assert obj["level"] == 6
