"""
Constants, defaults, and wire-format keys.
"""

AGENT_VERSION = "1.0.0"

# ─── Wire format ─────────────────────────────────────────────────
GELF_VERSION = "1.1"           # Schema version stamped on every record
DEFAULT_SEVERITY = 1           # Numeric passthrough, no level mapping
EXTENSION_PREFIX = "_"         # Extension fields go on the wire as "_<name>"
RECORD_ID_KEY = "id"           # Local-only key in the stored form, never sent

FIXED_KEYS = frozenset({
    "version",
    "host",
    "short_message",
    "full_message",
    "timestamp",
    "level",
})

# ─── Delivery ────────────────────────────────────────────────────
ACCEPTED_STATUS = 202          # The only status that acknowledges a batch
DEFAULT_BATCH_INTERVAL_SEC = 60
API_TIMEOUT_SEND = 5           # Seconds; a hung POST would starve later ticks
DEFAULT_MAX_RETRIES = 2        # urllib3 retries inside a single send
SESSION_RESET_AFTER = 3        # Consecutive transport failures before new session

# ─── Storage ─────────────────────────────────────────────────────
STORE_KEY = "LogEntries"
