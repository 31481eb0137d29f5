"""Frame assembly from extracted rows.

Fields are allocated at their final length first and then filled
positionally, so a finished frame never has padded or truncated columns.
"""

from collections.abc import Sequence

from sitewise_framer.core.config import DEFAULT_TIME_FIELD_NAME
from sitewise_framer.core.models import Field, FieldType, Frame, FrameMeta
from sitewise_framer.core.rows import Row


def new_field(name: str, field_type: FieldType, length: int) -> Field:
    """Allocate a field of the given type with length null cells."""
    return Field(name=name, type=field_type, values=[None] * length)


def assemble_frame(
    name: str,
    value_field_name: str,
    field_type: FieldType,
    rows: Sequence[Row],
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
    meta: FrameMeta | None = None,
) -> Frame:
    """Build a two-field time series frame.

    Args:
        name: Frame name (the asset display name).
        value_field_name: Value field name (the property display name).
        field_type: Type of the value field.
        rows: (time, value) rows in output order.
        time_field_name: Name of field 0.
        meta: Optional frame metadata.

    Returns:
        Frame whose fields both have exactly len(rows) cells.
    """
    length = len(rows)
    time_field = new_field(time_field_name, FieldType.TIME, length)
    value_field = new_field(value_field_name, field_type, length)

    for index, (time, value) in enumerate(rows):
        time_field.set(index, time)
        value_field.set(index, value)

    return Frame(
        name=name,
        fields=[time_field, value_field],
        meta=meta or FrameMeta(),
    )


def assemble_columns(
    name: str,
    times: Sequence[object],
    columns: Sequence[tuple[str, FieldType, Sequence[object | None]]],
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
    meta: FrameMeta | None = None,
) -> Frame:
    """Build a frame with one time field and several value fields.

    Args:
        name: Frame name.
        times: Time cells.
        columns: (name, type, cells) per value field; every cells sequence
            must have len(times) entries.
        time_field_name: Name of field 0.
        meta: Optional frame metadata.

    Raises:
        ValueError: If a column's length differs from the time column.
    """
    length = len(times)
    time_field = new_field(time_field_name, FieldType.TIME, length)
    for index, time in enumerate(times):
        time_field.set(index, time)

    fields = [time_field]
    for column_name, field_type, cells in columns:
        if len(cells) != length:
            raise ValueError(
                f"column {column_name!r} has {len(cells)} cells, expected {length}"
            )
        value_field = new_field(column_name, field_type, length)
        for index, cell in enumerate(cells):
            value_field.set(index, cell)
        fields.append(value_field)

    return Frame(name=name, fields=fields, meta=meta or FrameMeta())
