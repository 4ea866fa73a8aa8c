from linewriter.measurement import (
    KeyValue,
    Measurement,
    FieldValue,
    StringValue,
    CharValue,
    BoolValue,
    IntValue,
    FloatValue,
)
from linewriter.connection import Connection
from linewriter.transport import HttpTransport, SendResult, Transport, TransportInitError

__all__ = [
    "KeyValue",
    "Measurement",
    "FieldValue",
    "StringValue",
    "CharValue",
    "BoolValue",
    "IntValue",
    "FloatValue",
    "Connection",
    "HttpTransport",
    "SendResult",
    "Transport",
    "TransportInitError",
]
