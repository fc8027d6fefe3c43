"""
Record codec: LogRecord <-> GELF-style JSON objects.

Wire form: six fixed keys plus one "_<name>" key per extension field.
Stored form: the wire form plus an "id" key holding the record id. Decoding
ignores any other key that lacks the "_" prefix, so the two forms share one
decoder.
"""

import json
import math

from .constants import FIXED_KEYS, EXTENSION_PREFIX, RECORD_ID_KEY
from .errors import CodecError, UnsupportedFieldType
from .record import (
    LogRecord, StringValue, IntValue, FloatValue, BoolValue, field_value,
)


# ─── Encode ──────────────────────────────────────────────────────

def encode_record(record: LogRecord) -> dict:
    """Encode one record to its wire object. Raises CodecError."""
    obj = {
        "version": record.schema_version,
        "host": record.host,
        "short_message": record.short_message,
    }
    if record.full_message is not None:
        obj["full_message"] = record.full_message
    obj["timestamp"] = record.created_at
    obj["level"] = record.severity

    for name, value in record.extensions.items():
        tagged = field_value(value, name)
        if isinstance(tagged, FloatValue) and not math.isfinite(tagged.value):
            raise UnsupportedFieldType(name, tagged.value)
        obj[EXTENSION_PREFIX + name] = tagged.value
    return obj


def encode_stored(record: LogRecord) -> dict:
    """Wire object plus the local record id, for the durable store."""
    obj = encode_record(record)
    obj[RECORD_ID_KEY] = record.record_id
    return obj


def encode_batch(records) -> bytes:
    """JSON array body for one POST. Nothing is returned if any record fails."""
    objs = [encode_record(r) for r in records]
    try:
        return json.dumps(objs, allow_nan=False).encode("utf-8")
    except ValueError as e:
        raise CodecError(f"Batch is not valid JSON: {e}") from e


# ─── Decode ──────────────────────────────────────────────────────

def _tag_json_value(raw):
    """Map a decoded JSON scalar to its tag, or None for anything else."""
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, int):
        return IntValue(raw)
    if isinstance(raw, float):
        return FloatValue(raw)
    return None


def _require(obj, key, types):
    value = obj.get(key)
    if not isinstance(value, types) or isinstance(value, bool):
        raise CodecError(f"Missing or invalid {key!r} in record")
    return value


def decode_record(obj) -> LogRecord:
    """Decode a wire or stored object. Raises CodecError on a malformed record."""
    if not isinstance(obj, dict):
        raise CodecError(f"Record must be a JSON object, got {type(obj).__name__}")

    full_message = obj.get("full_message")
    if full_message is not None and not isinstance(full_message, str):
        raise CodecError("Invalid 'full_message' in record")

    extensions = {}
    for key, raw in obj.items():
        if key in FIXED_KEYS or not key.startswith(EXTENSION_PREFIX):
            continue
        tagged = _tag_json_value(raw)
        if tagged is not None:
            extensions[key[len(EXTENSION_PREFIX):]] = tagged

    kwargs = {}
    record_id = obj.get(RECORD_ID_KEY)
    if isinstance(record_id, str) and record_id:
        kwargs["record_id"] = record_id

    try:
        return LogRecord(
            schema_version=_require(obj, "version", str),
            host=_require(obj, "host", str),
            short_message=_require(obj, "short_message", str),
            full_message=full_message,
            created_at=float(_require(obj, "timestamp", (int, float))),
            severity=_require(obj, "level", int),
            extensions=extensions,
            **kwargs,
        )
    except ValueError as e:
        raise CodecError(str(e)) from e


def decode_batch(body) -> list:
    """Decode a JSON array body into records."""
    try:
        objs = json.loads(body)
    except ValueError as e:
        raise CodecError(f"Batch is not valid JSON: {e}") from e
    if not isinstance(objs, list):
        raise CodecError("Batch must be a JSON array")
    return [decode_record(o) for o in objs]
