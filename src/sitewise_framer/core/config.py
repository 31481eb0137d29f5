"""Producer configuration."""

from dataclasses import dataclass

from sitewise_framer.core.models import FieldType

DEFAULT_TIME_FIELD_NAME = "time"


@dataclass(frozen=True)
class FramerConfig:
    """Options for frame production.

    Attributes:
        time_field_name: Name of the time field, always field 0.
        fallback_field_type: Value field type used when neither the declared
            property type nor any value tells what the column holds.
        log_rows: Dump extracted rows at DEBUG level. Off by default; even
            when on, rows are only formatted if DEBUG is enabled.
    """

    time_field_name: str = DEFAULT_TIME_FIELD_NAME
    fallback_field_type: FieldType = FieldType.STRING
    log_rows: bool = False
