"""
Exception taxonomy for the shipping agent.

Only ConfigurationError and UnsupportedFieldType ever reach a caller of
log(); everything raised on the delivery path is logged and absorbed by the
flush cycle.
"""


class ShipperError(Exception):
    """Base class for all agent errors."""


class ConfigurationError(ShipperError):
    """Invalid settings, or the agent used before it was configured."""


class CodecError(ShipperError):
    """A record could not be encoded to, or decoded from, its JSON form."""


class UnsupportedFieldType(CodecError):
    """An extension value is not a string, integer, float, or boolean."""

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__(
            f"Unsupported type for extension field {name!r}: {type(value).__name__}"
        )


class TransportError(ShipperError):
    """The POST never got a response (connection refused, timeout, ...)."""


class DeliveryRejected(ShipperError):
    """The collector answered with anything other than 202 Accepted."""

    def __init__(self, status_code, body=""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Collector rejected batch: HTTP {status_code}")


class InvalidRecord(CodecError, ValueError):
    """A fixed record field has the wrong type or an empty value."""
