"""
Durable store: one JSON collection kept under a single fixed key.

load() never fails. A missing, unreadable, or corrupt backing file reads as
an empty collection. save() replaces the whole collection atomically
(temp file + os.replace), so a crash mid-write leaves the previous version.

Stores are not synchronized. The caller serializes every read-modify-write.
"""

import copy
import json
import os
from pathlib import Path

from .config import log
from .constants import STORE_KEY


class JsonFileStore:
    """JSON document on disk used as a small key-value map."""

    def __init__(self, path, key=STORE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_document(self):
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Store %s unreadable, treating as empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Store %s is not a JSON object, treating as empty", self.path)
            return {}
        return data

    def load(self) -> list:
        items = self._read_document().get(self.key)
        if items is None:
            return []
        if not isinstance(items, list):
            log.warning("Store key %r is not a list, treating as empty", self.key)
            return []
        return items

    def save(self, items):
        document = self._read_document()
        document[self.key] = list(items)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(document, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)


class MemoryStore:
    """In-process store. Shares the copy-on-read/write behaviour of the file store."""

    def __init__(self, key=STORE_KEY):
        self.key = key
        self._data = {}

    def load(self) -> list:
        return copy.deepcopy(self._data.get(self.key, []))

    def save(self, items):
        self._data[self.key] = copy.deepcopy(list(items))
