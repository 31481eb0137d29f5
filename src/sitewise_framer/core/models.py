"""Core domain models for SiteWise responses and data frames."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from sitewise_framer.core.errors import FieldTypeError


@dataclass(frozen=True)
class Timestamp:
    """A SiteWise timestamp.

    Attributes:
        time_in_seconds: Unix timestamp in seconds.
        offset_in_nanos: Sub-second offset in nanoseconds.
    """

    time_in_seconds: int
    offset_in_nanos: int = 0


@dataclass(frozen=True)
class DoubleValue:
    value: float


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class BooleanValue:
    value: bool


# Exactly one kind per value; an unset variant is represented by None.
Variant = DoubleValue | IntegerValue | StringValue | BooleanValue


class Quality(Enum):
    GOOD = "GOOD"
    BAD = "BAD"
    UNCERTAIN = "UNCERTAIN"


class PropertyDataType(Enum):
    """Declared data type of an asset property."""

    DOUBLE = "DOUBLE"
    INTEGER = "INTEGER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    STRUCT = "STRUCT"


@dataclass(frozen=True)
class PropertyValue:
    """One timestamped measurement of a single asset property.

    Attributes:
        value: The populated variant, or None when the source omitted it.
        timestamp: When the value was recorded.
        quality: Optional data quality indicator.
    """

    value: Variant | None
    timestamp: Timestamp
    quality: Quality | None = None


@dataclass(frozen=True)
class PropertyMetadata:
    """Resolved description of an asset property.

    Attributes:
        asset_id: Asset identifier.
        asset_name: Asset display name, used as the frame name.
        property_id: Property identifier.
        property_name: Property display name, used as the value field name.
        data_type: Declared data type, when the resolver knows it.
        unit: Optional unit of measure.
    """

    asset_id: str
    asset_name: str
    property_id: str
    property_name: str
    data_type: PropertyDataType | None = None
    unit: str | None = None


@dataclass(frozen=True)
class Aggregates:
    average: float | None = None
    count: float | None = None
    maximum: float | None = None
    minimum: float | None = None
    sum: float | None = None
    standard_deviation: float | None = None


@dataclass(frozen=True)
class AggregatedValue:
    """One aggregation window returned by an aggregates query."""

    timestamp: Timestamp
    value: Aggregates
    resolution: str | None = None
    quality: Quality | None = None


@dataclass(frozen=True)
class BatchEntry:
    """A successful entry of a batch latest-value call."""

    entry_id: str
    asset_id: str
    property_id: str
    property_value: PropertyValue | None = None


@dataclass(frozen=True)
class BatchError:
    """A failed entry of a batch latest-value call."""

    entry_id: str
    error_code: str
    error_message: str


class FieldType(Enum):
    """Semantic type of a frame column."""

    TIME = "time"
    FLOAT64 = "number"
    INT64 = "int64"
    STRING = "string"
    BOOL = "boolean"


_PYTHON_TYPES: dict[FieldType, type] = {
    FieldType.TIME: datetime,
    FieldType.FLOAT64: float,
    FieldType.INT64: int,
    FieldType.STRING: str,
    FieldType.BOOL: bool,
}


def accepts(field_type: FieldType, value: object) -> bool:
    """Return True if value can be stored in a field of field_type.

    None is always accepted. No coercion between numeric kinds: an int is
    not a FLOAT64 value, and a bool is never an INT64 value.
    """
    if value is None:
        return True
    expected = _PYTHON_TYPES[field_type]
    if expected is int and isinstance(value, bool):
        return False
    if expected is datetime:
        return isinstance(value, datetime)
    return type(value) is expected


@dataclass
class Field:
    """A named, typed column of a frame.

    Attributes:
        name: Column name.
        type: Semantic column type.
        values: Column cells; every cell is nullable.
        labels: Optional dimension labels.
    """

    name: str
    type: FieldType
    values: list[object | None] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for value in self.values:
            self._check(value)

    def __len__(self) -> int:
        return len(self.values)

    def _check(self, value: object) -> None:
        if not accepts(self.type, value):
            raise FieldTypeError(self.name, self.type, value)

    def set(self, index: int, value: object | None) -> None:
        """Store value at index, rejecting values of the wrong kind."""
        self._check(value)
        self.values[index] = value

    def append(self, value: object | None) -> None:
        self._check(value)
        self.values.append(value)


@dataclass(frozen=True)
class FrameMeta:
    """Frame-level metadata.

    Attributes:
        next_token: Pagination token of the source response, if any.
        notices: Human-readable notices attached to the frame.
    """

    next_token: str | None = None
    notices: tuple[str, ...] = ()


@dataclass
class Frame:
    """A named table of equal-length typed fields."""

    name: str
    fields: list[Field] = field(default_factory=list)
    ref_id: str = ""
    meta: FrameMeta = field(default_factory=FrameMeta)

    def __post_init__(self) -> None:
        lengths = {len(f) for f in self.fields}
        if len(lengths) > 1:
            raise ValueError(
                f"frame {self.name!r} has fields of unequal length: "
                f"{sorted(lengths)}"
            )

    @property
    def length(self) -> int:
        """Number of rows in the frame."""
        return len(self.fields[0]) if self.fields else 0

    def field_by_name(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def rows(self) -> list[tuple[object | None, ...]]:
        """Return the frame contents row by row."""
        return list(zip(*(f.values for f in self.fields), strict=True))
