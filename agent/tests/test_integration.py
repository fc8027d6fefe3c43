"""End-to-end: a real loopback HTTP collector and a file-backed agent."""

import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from shipper_core.app import LogAgent
from shipper_core.config import AgentSettings
from shipper_core.delivery import DeliveryState
from shipper_core.store import JsonFileStore


class _Collector(HTTPServer):
    def __init__(self):
        super().__init__(("127.0.0.1", 0), _Handler)
        self.status = 202
        self.batches = []
        self.content_types = []


class _Handler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.server.batches.append(json.loads(body))
        self.server.content_types.append(self.headers.get("Content-Type"))
        self.send_response(self.server.status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def collector():
    server = _Collector()
    t = threading.Thread(target=server.serve_forever, daemon=True)
    t.start()
    yield server
    server.shutdown()
    server.server_close()


def _settings(collector, tmp_path, **kwargs):
    host, port = collector.server_address
    return AgentSettings(
        endpoint=f"http://{host}:{port}/gelf",
        batch_interval=3600,
        host="it-host",
        max_retries=0,
        store_path=tmp_path / "pending.json",
        **kwargs,
    )


def test_accepted_batch_clears_store(collector, tmp_path):
    settings = _settings(collector, tmp_path)
    with LogAgent(settings) as agent:
        agent.log("boot", severity=6).result(timeout=5)
        agent.log("ready", full_message="all systems go", extensions={"port": 8080}).result(timeout=5)
        assert agent.flush_now().result(timeout=10) is DeliveryState.ACKNOWLEDGED

    (batch,) = collector.batches
    assert [o["short_message"] for o in batch] == ["boot", "ready"]
    assert batch[1]["_port"] == 8080
    assert batch[1]["full_message"] == "all systems go"
    assert collector.content_types == ["application/json"]
    assert JsonFileStore(settings.store_path).load() == []


def test_rejected_then_accepted(collector, tmp_path):
    collector.status = 500
    settings = _settings(collector, tmp_path)
    with LogAgent(settings) as agent:
        agent.log("retry me").result(timeout=5)
        assert agent.flush_now().result(timeout=10) is DeliveryState.REJECTED
        assert len(JsonFileStore(settings.store_path).load()) == 1

        collector.status = 202
        assert agent.flush_now().result(timeout=10) is DeliveryState.ACKNOWLEDGED

    assert len(collector.batches) == 2
    assert JsonFileStore(settings.store_path).load() == []


def test_connection_refused_keeps_records(tmp_path):
    server = HTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    host, port = server.server_address
    server.server_close()

    settings = AgentSettings(
        endpoint=f"http://{host}:{port}/gelf",
        batch_interval=3600,
        max_retries=0,
        timeout=2,
        store_path=tmp_path / "pending.json",
    )
    with LogAgent(settings) as agent:
        agent.log("offline").result(timeout=5)
        assert agent.flush_now().result(timeout=10) is DeliveryState.TRANSPORT_FAILED

    (obj,) = JsonFileStore(settings.store_path).load()
    assert obj["short_message"] == "offline"
