"""Shared fixtures: settings, in-memory store, and a fake HTTP session."""

from unittest.mock import Mock

import pytest

from shipper_core.config import AgentSettings
from shipper_core.store import MemoryStore


ENDPOINT = "http://collector.test/gelf"


def make_response(status_code=202, text=""):
    return Mock(status_code=status_code, text=text)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session():
    """requests.Session stand-in that answers 202 unless told otherwise."""
    s = Mock()
    s.post.return_value = make_response(202)
    return s


@pytest.fixture
def settings(tmp_path):
    return AgentSettings(
        endpoint=ENDPOINT,
        batch_interval=3600,
        host="test-host",
        store_path=tmp_path / "pending.json",
    )
