"""
LogRecord and the tagged extension-field values it carries.

Extension values are a closed set of four scalar tags. A plain Python value
is tagged once, when the record is built, so the JSON codec never has to
guess a type from its text.
"""

import math
import time
import uuid
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from .constants import GELF_VERSION, DEFAULT_SEVERITY
from .errors import InvalidRecord, UnsupportedFieldType


# ─── Extension field values ──────────────────────────────────────

@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IntValue:
    value: int


@dataclass(frozen=True)
class FloatValue:
    value: float


@dataclass(frozen=True)
class BoolValue:
    value: bool


FieldValue = Union[StringValue, IntValue, FloatValue, BoolValue]
FIELD_VALUE_TYPES = (StringValue, IntValue, FloatValue, BoolValue)


def field_value(raw, name="?") -> FieldValue:
    """Tag a plain value. bool is checked first since it subclasses int."""
    if isinstance(raw, FIELD_VALUE_TYPES):
        return raw
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, int):
        return IntValue(raw)
    if isinstance(raw, float):
        return FloatValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    raise UnsupportedFieldType(name, raw)


def _new_record_id():
    return uuid.uuid4().hex


# ─── LogRecord ───────────────────────────────────────────────────

@dataclass(frozen=True)
class LogRecord:
    host: str
    short_message: str
    created_at: float
    full_message: Optional[str] = None
    severity: int = DEFAULT_SEVERITY
    extensions: Mapping[str, FieldValue] = field(default_factory=dict)
    schema_version: str = GELF_VERSION
    # Acknowledgment identity. Timestamps collide within one clock tick.
    record_id: str = field(default_factory=_new_record_id, compare=False)

    def __post_init__(self):
        # Same rules the decoder applies, so whatever is stored can be reloaded.
        if not isinstance(self.short_message, str) or not self.short_message:
            raise InvalidRecord("short_message must be a non-empty string")
        if self.full_message is not None and not isinstance(self.full_message, str):
            raise InvalidRecord("full_message must be a string or None")
        if not isinstance(self.severity, int) or isinstance(self.severity, bool):
            raise InvalidRecord("severity must be an integer")
        if (not isinstance(self.created_at, (int, float)) or isinstance(self.created_at, bool)
                or not math.isfinite(self.created_at)):
            raise InvalidRecord("created_at must be a finite number")
        if not isinstance(self.host, str) or not isinstance(self.schema_version, str):
            raise InvalidRecord("host and schema_version must be strings")

    @classmethod
    def create(cls, short_message, full_message=None, severity=DEFAULT_SEVERITY,
               extensions=None, host="localhost", created_at=None):
        """Build a record stamped with the current wall-clock time."""
        tagged = {
            name: field_value(raw, name)
            for name, raw in (extensions or {}).items()
        }
        return cls(
            host=host,
            short_message=short_message,
            full_message=full_message,
            created_at=time.time() if created_at is None else created_at,
            severity=severity,
            extensions=tagged,
        )

    def fields(self) -> dict:
        """Extension values unwrapped to plain Python scalars."""
        return {
            name: v.value if isinstance(v, FIELD_VALUE_TYPES) else v
            for name, v in self.extensions.items()
        }
