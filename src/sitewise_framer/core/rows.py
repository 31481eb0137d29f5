"""Row extraction from SiteWise records."""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from sitewise_framer.core.models import PropertyValue, Timestamp, Variant

Row = tuple[datetime, object | None]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_datetime(timestamp: Timestamp) -> datetime:
    """Convert a SiteWise timestamp to a UTC datetime.

    The source is already UTC, so no timezone adjustment happens.
    Nanoseconds are truncated to microsecond precision.
    """
    return _EPOCH + timedelta(
        seconds=timestamp.time_in_seconds,
        microseconds=timestamp.offset_in_nanos // 1000,
    )


def variant_value(variant: Variant | None) -> object | None:
    """Return the populated variant's value verbatim, or None if unset."""
    if variant is None:
        return None
    return variant.value


def row_for(value: PropertyValue) -> Row:
    return (to_datetime(value.timestamp), variant_value(value.value))


def extract_rows(records: PropertyValue | Iterable[PropertyValue]) -> list[Row]:
    """Produce rows from one record or an ordered sequence of records.

    Args:
        records: A single PropertyValue, or an iterable of them.

    Returns:
        Rows in source order; exactly one row for a single record.
    """
    if isinstance(records, PropertyValue):
        return [row_for(records)]
    return [row_for(record) for record in records]
