"""
Process-wide convenience API over a single LogAgent.

    from shipper_core import facade
    facade.configure("https://logs.example.com/gelf", batch_interval=30)
    facade.log("boot", severity=6)

configure() takes effect once; later calls only log a warning. Calling
log() or get_agent() first raises ConfigurationError. Applications that
own their composition root can build a LogAgent directly instead.
"""

import threading

from .app import LogAgent
from .config import log as _log, AgentSettings
from .constants import DEFAULT_BATCH_INTERVAL_SEC, DEFAULT_SEVERITY
from .errors import ConfigurationError

_instance = None
_lock = threading.Lock()


def configure(endpoint, batch_interval=DEFAULT_BATCH_INTERVAL_SEC, store=None, session=None, **options):
    """Create and start the process-wide agent. Extra options go to AgentSettings."""
    global _instance
    with _lock:
        if _instance is not None:
            _log.warning("Log agent is already configured, ignoring configure(%s)", endpoint)
            return _instance
        settings = AgentSettings(endpoint=endpoint, batch_interval=batch_interval, **options)
        _instance = LogAgent(settings, store=store, session=session).start()
        return _instance


def get_agent() -> LogAgent:
    agent = _instance
    if agent is None:
        raise ConfigurationError("Log agent not configured. Call configure(endpoint) first.")
    return agent


def log(short_message, full_message=None, severity=DEFAULT_SEVERITY, extensions=None):
    return get_agent().log(short_message, full_message, severity, extensions)


def shutdown(timeout=None):
    """Stop and forget the process-wide agent. configure() may be called again afterwards."""
    global _instance
    with _lock:
        agent, _instance = _instance, None
    if agent is not None:
        agent.stop(timeout)
