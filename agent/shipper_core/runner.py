"""
Entry point: load settings, start the agent, run until interrupted.
"""

import sys
import threading

from .constants import AGENT_VERSION
from .config import log, setup_logging, load_settings, CONFIG_FILE
from .errors import ConfigurationError
from .app import LogAgent


def main(config_path=CONFIG_FILE, stop_event=None):
    """Primary agent entry point. Returns the process exit code."""
    setup_logging()
    log.info("Log shipping agent v%s", AGENT_VERSION)

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        log.error("Cannot start: %s", e)
        return 1

    stop_event = stop_event or threading.Event()
    agent = LogAgent(settings).start()
    agent.log("Log shipping agent started", severity=6,
              extensions={"agent_version": AGENT_VERSION})
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        log.info("Agent stopped by user (Ctrl+C)")
    finally:
        agent.stop(timeout=settings.timeout + 5)
    return 0


if __name__ == "__main__":
    sys.exit(main())
