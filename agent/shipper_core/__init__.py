"""
shipper_core: durable, batched log shipping to a GELF HTTP collector
=====================================================================
Architecture: one serial worker thread owns the queue and the network.

  constants.py    → Version, defaults, wire keys
  config.py       → Paths, logging, AgentSettings load/save
  errors.py       → Exception taxonomy
  record.py       → LogRecord + tagged extension values
  codec.py        → LogRecord <-> JSON (wire and stored forms)
  store.py        → JsonFileStore / MemoryStore (single fixed key)
  shipper.py      → ShipperQueue (enqueue / flush / acknowledge)
  worker.py       → SerialWorker (single-threaded hand-off)
  http_client.py  → HTTP session with retry/pooling
  delivery.py     → DeliveryClient (POST batch, 202 = acknowledged)
  scheduler.py    → FlushScheduler (periodic ticks, explicit stop)
  app.py          → LogAgent (composition of all of the above)
  facade.py       → Process-wide configure() / log()
  runner.py       → main()
"""

from .app import LogAgent
from .config import AgentSettings, load_settings
from .delivery import DeliveryState
from .errors import (
    ShipperError, ConfigurationError, CodecError, UnsupportedFieldType,
    InvalidRecord, TransportError, DeliveryRejected,
)
from .record import LogRecord, StringValue, IntValue, FloatValue, BoolValue

__all__ = [
    "LogAgent", "AgentSettings", "load_settings", "DeliveryState",
    "ShipperError", "ConfigurationError", "CodecError", "UnsupportedFieldType",
    "InvalidRecord",
    "TransportError", "DeliveryRejected",
    "LogRecord", "StringValue", "IntValue", "FloatValue", "BoolValue",
]
