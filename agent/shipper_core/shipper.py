"""
ShipperQueue: the in-memory view of pending records, written through to
the durable store on every mutation.

Not thread-safe on its own. LogAgent calls it only from its serial worker,
which is what keeps enqueue, flush, and acknowledge from interleaving.
"""

from .config import log
from .codec import decode_record, encode_stored
from .errors import CodecError


class ShipperQueue:
    """Ordered, durable queue of records waiting for a 202."""

    def __init__(self, store):
        self._store = store
        # (record, stored object) pairs in insertion order
        self._entries = self._load()

    def _load(self):
        entries = []
        dropped = 0
        for obj in self._store.load():
            try:
                record = decode_record(obj)
            except CodecError as e:
                dropped += 1
                log.warning("Dropping malformed stored record: %s", e)
                continue
            entries.append((record, encode_stored(record)))
        if entries or dropped:
            log.info("Loaded %d pending record(s) from store (%d dropped)", len(entries), dropped)
        return entries

    # ── Mutations ─────────────────────────────────────────────

    def enqueue(self, record):
        """Append and persist before returning. On failure nothing changes."""
        entries = self._entries + [(record, encode_stored(record))]
        self._store.save([obj for _, obj in entries])
        self._entries = entries

    def acknowledge(self, batch) -> int:
        """Remove every pending record whose id appears in batch. Returns the count."""
        acked = {r.record_id for r in batch}
        remaining = [e for e in self._entries if e[0].record_id not in acked]
        removed = len(self._entries) - len(remaining)
        if removed:
            self._store.save([obj for _, obj in remaining])
            self._entries = remaining
        return removed

    # ── Reads ─────────────────────────────────────────────────

    def flush(self, limit=None) -> list:
        """Snapshot of pending records, oldest first. Empty means nothing to send."""
        entries = self._entries if limit is None else self._entries[:limit]
        return [record for record, _ in entries]

    @property
    def pending(self) -> int:
        return len(self._entries)

    def __len__(self):
        return len(self._entries)
