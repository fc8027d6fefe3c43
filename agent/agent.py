"""
Log Shipping Agent
==================
Buffers structured log events on local disk and ships them in batches to a
GELF HTTP collector. Records leave the local queue only after the collector
answers 202 Accepted.

Configuration: <base dir>/config.json ({"endpoint": "...", "batchIntervalSec": 60})
or LOGSHIP_* environment variables.

Usage:
    python agent.py
"""

import sys

from shipper_core.runner import main

if __name__ == "__main__":
    sys.exit(main())
