"""
Measurement builder for InfluxDB line protocol points.

Values are rendered to their wire form as soon as they are added; nothing is
escaped. Callers are responsible for keeping names and tag values free of
',', ' ' and '='.
"""
from typing import List, Optional, Any

from influxdb_client import WritePrecision

DEFAULT_PRECISION = WritePrecision.MS
NANOSECONDS = WritePrecision.NS
DEFAULT_FLOAT_PRECISION = 5


class KeyValue:
    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __str__(self):
        return f"{self.name}={self.value}"

    def __eq__(self, other):
        if not isinstance(other, KeyValue):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __repr__(self):
        return f"KeyValue({self.name!r}, {self.value!r})"


class FieldValue:
    """Base for the field encodings supported by line protocol."""

    def render(self) -> str:
        raise NotImplementedError


class StringValue(FieldValue):
    def __init__(self, value: str):
        self.value = value

    def render(self) -> str:
        return f'"{self.value}"'


class CharValue(FieldValue):
    def __init__(self, value: str):
        if not isinstance(value, str) or len(value) != 1:
            raise ValueError(f"CharValue needs exactly one character, got {value!r}")
        self.value = value

    def render(self) -> str:
        return f'"{self.value}"'


class BoolValue(FieldValue):
    def __init__(self, value: bool):
        self.value = bool(value)

    def render(self) -> str:
        return "t" if self.value else "f"


class IntValue(FieldValue):
    def __init__(self, value: int):
        self.value = int(value)

    def render(self) -> str:
        return f"{self.value}i"


class FloatValue(FieldValue):
    def __init__(self, value: float, precision: int = DEFAULT_FLOAT_PRECISION):
        self.value = float(value)
        self.precision = precision

    def render(self) -> str:
        # significant digits, same as a default-formatted stream
        return f"{self.value:.{self.precision}g}"


def to_field_value(value: Any, precision: int = DEFAULT_FLOAT_PRECISION) -> FieldValue:
    if isinstance(value, FieldValue):
        return value
    # bool is a subclass of int
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, int):
        return IntValue(value)
    if isinstance(value, float):
        return FloatValue(value, precision)
    if isinstance(value, str):
        return StringValue(value)
    raise TypeError(f"Unsupported field type for line protocol: {type(value).__name__}")


class Measurement:
    """
    A single point: measurement name, tags, fields and an optional timestamp.

    Every builder method returns the instance so calls can be chained:

        Measurement("cpu").tag("host", "a").field("usage", 0.5).timestamp(1700000000000)

    Passing ``precision`` marks it as a per-point override of the connection's
    default precision.
    """

    def __init__(self, name: str = "", precision: Optional[str] = None):
        self.name = name
        self.tags: List[KeyValue] = []
        self.fields: List[KeyValue] = []
        self.precision = precision
        self.ts: Optional[int] = None

    @property
    def has_precision(self) -> bool:
        return self.precision is not None

    @property
    def has_timestamp(self) -> bool:
        return self.ts is not None

    def tag(self, name: str, value: str) -> "Measurement":
        self.tags.append(KeyValue(name, str(value)))
        return self

    def field(self, name: str, value: Any, precision: int = DEFAULT_FLOAT_PRECISION) -> "Measurement":
        self.fields.append(KeyValue(name, to_field_value(value, precision).render()))
        return self

    def timestamp(self, value: int) -> "Measurement":
        self.ts = int(value)
        return self

    def effective_precision(self, default: str) -> str:
        if self.precision is not None and self.precision != NANOSECONDS:
            return self.precision
        return default

    def copy(self) -> "Measurement":
        other = Measurement(self.name, self.precision)
        other.tags = list(self.tags)
        other.fields = list(self.fields)
        other.ts = self.ts
        return other

    def assign(self, other: "Measurement") -> "Measurement":
        """
        Take name, tags and fields from ``other``.

        Precision and timestamp are only taken when ``other`` has them set; an
        unset timestamp on ``other`` leaves this point's timestamp as it was.
        """
        self.name = other.name
        self.tags = list(other.tags)
        self.fields = list(other.fields)
        if other.has_precision:
            self.precision = other.precision
        if other.has_timestamp:
            self.ts = other.ts
        return self

    def __repr__(self):
        return (f"Measurement(name={self.name!r}, tags={len(self.tags)}, fields={len(self.fields)}, "
                f"precision={self.precision!r}, ts={self.ts!r})")
