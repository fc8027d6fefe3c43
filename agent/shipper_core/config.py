"""
Paths, logging setup, settings load.
"""

import os
import json
import sys
import logging
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .constants import (
    DEFAULT_BATCH_INTERVAL_SEC, API_TIMEOUT_SEND, DEFAULT_MAX_RETRIES,
)
from .errors import ConfigurationError


# ─── Paths ───────────────────────────────────────────────────────
# One config and one pending-queue file per machine. LOGSHIP_HOME moves both.
_FOLDER_NAME = "logship"

if os.environ.get("LOGSHIP_HOME"):
    BASE_DIR = Path(os.environ["LOGSHIP_HOME"])
elif sys.platform == "win32":
    BASE_DIR = Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData")) / _FOLDER_NAME
else:
    BASE_DIR = Path.home() / f".{_FOLDER_NAME}"

CONFIG_FILE = BASE_DIR / "config.json"
LOG_FILE = BASE_DIR / "agent.log"
STORE_FILE = BASE_DIR / "pending.json"


# ─── Logging ─────────────────────────────────────────────────────

log = logging.getLogger("logship")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
_LOG_MAX_BYTES = 1_000_000


def setup_logging(log_file=LOG_FILE, level=logging.INFO):
    """Attach a file handler and a stdout handler to the agent logger.

    The file is truncated once it passes ~1 MB so a long-running agent
    never fills the disk with its own diagnostics.
    """
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)
    log.setLevel(level)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            if log_file.exists() and log_file.stat().st_size > _LOG_MAX_BYTES:
                log_file.write_text("")
        except OSError:
            pass
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)
    return log


# ─── Settings ────────────────────────────────────────────────────

@dataclass(frozen=True)
class AgentSettings:
    endpoint: str
    batch_interval: float = DEFAULT_BATCH_INTERVAL_SEC
    host: str = field(default_factory=lambda: platform.node() or "localhost")
    timeout: float = API_TIMEOUT_SEND
    max_retries: int = DEFAULT_MAX_RETRIES
    headers: dict = field(default_factory=dict)
    max_batch_size: Optional[int] = None
    store_path: Path = STORE_FILE

    def __post_init__(self):
        parsed = urlparse(self.endpoint or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"endpoint must be an http(s) URL, got {self.endpoint!r}")
        if self.batch_interval <= 0:
            raise ConfigurationError("batch_interval must be positive")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must not be negative")
        if self.max_batch_size is not None and self.max_batch_size < 1:
            raise ConfigurationError("max_batch_size must be at least 1")
        if not self.host:
            raise ConfigurationError("host must not be empty")


# Config-file key → (settings field, converter). Keys follow config.json's camelCase.
_FILE_KEYS = {
    "endpoint": ("endpoint", str),
    "batchIntervalSec": ("batch_interval", float),
    "host": ("host", str),
    "timeoutSec": ("timeout", float),
    "maxRetries": ("max_retries", int),
    "headers": ("headers", dict),
    "maxBatchSize": ("max_batch_size", int),
    "storePath": ("store_path", Path),
}

_ENV_KEYS = {
    "LOGSHIP_ENDPOINT": ("endpoint", str),
    "LOGSHIP_BATCH_INTERVAL": ("batch_interval", float),
    "LOGSHIP_HOST": ("host", str),
    "LOGSHIP_TIMEOUT": ("timeout", float),
    "LOGSHIP_MAX_RETRIES": ("max_retries", int),
    "LOGSHIP_MAX_BATCH_SIZE": ("max_batch_size", int),
    "LOGSHIP_STORE_PATH": ("store_path", Path),
}


def load_config(path=CONFIG_FILE):
    """Load config from disk. Returns dict or None."""
    path = Path(path)
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.warning("Unreadable config %s: %s", path, e)
            return None
        return data if isinstance(data, dict) else None
    return None


def load_settings(path=CONFIG_FILE, environ=None):
    """Build AgentSettings from the config file, then override with LOGSHIP_* env vars."""
    environ = os.environ if environ is None else environ
    values = {}

    config = load_config(path) or {}
    for key, (name, convert) in _FILE_KEYS.items():
        if config.get(key) is not None:
            values[name] = _convert(key, config[key], convert)

    for key, (name, convert) in _ENV_KEYS.items():
        if environ.get(key):
            values[name] = _convert(key, environ[key], convert)

    if "endpoint" not in values:
        raise ConfigurationError(
            f"No endpoint configured (set 'endpoint' in {path} or LOGSHIP_ENDPOINT)"
        )
    return AgentSettings(**values)


def _convert(key, raw, convert):
    try:
        return convert(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from e
