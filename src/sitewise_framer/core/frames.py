"""Helpers for combining and trimming time series frames.

Used by callers that page through a series (append the next page onto the
frames already received) or reuse frames for a shifted time range (trim rows
outside the new range).

The cache helpers at the end of the module decide whether a relative range
query can be served partly from frames of an earlier response, which range
still has to be fetched, and how the earlier frames are trimmed to fit.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from sitewise_framer.core.config import DEFAULT_TIME_FIELD_NAME
from sitewise_framer.core.models import Field, Frame


def _format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    pairs = ", ".join(f'{key}="{labels[key]}"' for key in sorted(labels))
    return "{" + pairs + "}"


def schema_key(frame: Frame) -> str:
    """Return a key identifying the frame's shape.

    Frames with equal keys have the same ref id, name, and field names,
    types and labels in the same order, so their rows can be concatenated.
    """
    key = f"{frame.ref_id}/{len(frame.fields)}/{frame.name}"
    for f in frame.fields:
        key += f"|{f.name}:{f.type.value}{_format_labels(f.labels)}"
    return key


def _copy_frame(frame: Frame) -> Frame:
    return replace(
        frame,
        fields=[
            Field(name=f.name, type=f.type, values=list(f.values), labels=dict(f.labels))
            for f in frame.fields
        ],
    )


def append_matching_frames(
    previous: Iterable[Frame], new: Iterable[Frame]
) -> list[Frame]:
    """Append new frames onto previous frames with the same schema.

    Empty frames are dropped from both inputs. Rows of a new frame whose
    schema matches a previous frame are appended to a copy of that frame;
    other new frames are added to the output as they are. Input frames are
    not modified.

    Args:
        previous: Frames already held by the caller.
        new: Frames from the next response.

    Returns:
        Previous frames (extended) followed by unmatched new frames.
    """
    by_key: dict[str, Frame] = {}
    out: list[Frame] = []
    for frame in previous:
        if not frame.length:
            continue
        copy = _copy_frame(frame)
        by_key[schema_key(copy)] = copy
        out.append(copy)

    for frame in new:
        if not frame.length:
            continue
        old = by_key.get(schema_key(frame))
        if old is None:
            out.append(frame)
            continue
        for target, source in zip(old.fields, frame.fields, strict=True):
            for value in source.values:
                target.append(value)

    return out


def _first_after(times: list[datetime], bound: datetime) -> int:
    for index, time in enumerate(times):
        if time > bound:
            return index
    return len(times)


def _slice_bounds(
    times: list[datetime], start: datetime, end: datetime, last_observation: bool
) -> tuple[int, int]:
    # start is exclusive, end is inclusive
    from_index = _first_after(times, start)
    if last_observation and from_index < len(times):
        from_index = max(from_index - 1, 0)
    to_index = _first_after(times, end)
    return from_index, to_index


def trim_time_series_frame(
    frame: Frame,
    start: datetime,
    end: datetime,
    last_observation: bool = False,
    descending: bool = False,
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
) -> Frame:
    """Keep only the rows of frame with start < time <= end.

    Args:
        frame: Frame with a time field named time_field_name.
        start: Exclusive lower bound.
        end: Inclusive upper bound.
        last_observation: Also keep the last row before the range.
        descending: The frame is sorted newest first.
        time_field_name: Name of the time field.

    Returns:
        A new frame; the input is not modified. A frame without fields
        trims to an empty frame.

    Raises:
        KeyError: If the frame has fields but no time field.
    """
    if not frame.fields:
        return replace(frame, fields=[])

    time_field = frame.field_by_name(time_field_name)
    if time_field is None:
        raise KeyError(f"frame {frame.name!r} has no field {time_field_name!r}")

    times = list(time_field.values)
    if descending:
        times.reverse()
    from_index, to_index = _slice_bounds(times, start, end, last_observation)

    trimmed = []
    for f in frame.fields:
        values = list(f.values)
        if descending:
            values = values[::-1][from_index:to_index][::-1]
        else:
            values = values[from_index:to_index]
        trimmed.append(Field(name=f.name, type=f.type, values=values, labels=dict(f.labels)))

    return replace(frame, fields=trimmed)


# Data newer than this is always fetched again.
REFRESH_WINDOW = timedelta(minutes=15)


class QueryKind(Enum):
    """Kind of query that produced a frame."""

    PROPERTY_VALUE = "PropertyValue"
    PROPERTY_VALUE_HISTORY = "PropertyValueHistory"
    PROPERTY_AGGREGATE = "PropertyAggregate"
    PROPERTY_INTERPOLATED = "PropertyInterpolated"
    OTHER = "Other"


TIME_SERIES_QUERY_KINDS = frozenset(
    {
        QueryKind.PROPERTY_VALUE,
        QueryKind.PROPERTY_VALUE_HISTORY,
        QueryKind.PROPERTY_AGGREGATE,
        QueryKind.PROPERTY_INTERPOLATED,
    }
)


@dataclass(frozen=True)
class CachedFrame:
    """A frame from an earlier response with the query that produced it.

    Attributes:
        frame: The frame as it was returned.
        kind: Kind of query that produced the frame.
        descending: The query asked for newest-first ordering.
        last_observation: The query asked for the last value before the range.
    """

    frame: Frame
    kind: QueryKind = QueryKind.OTHER
    descending: bool = False
    last_observation: bool = False


def is_cacheable_time_range(
    start: datetime, end: datetime, relative: bool = True
) -> bool:
    """Return True if a range's older data can be reused.

    Only ranges relative to now qualify, and only when they start before
    the refresh window that ends at end.
    """
    if not relative:
        return False
    return start < end - REFRESH_WINDOW


def is_time_range_covering_start(
    cached: tuple[datetime, datetime], requested: tuple[datetime, datetime]
) -> bool:
    """Return True if the cached range contains the requested range's start."""
    cached_start, cached_end = cached
    return cached_start <= requested[0] < cached_end


def paginating_request_range(
    requested: tuple[datetime, datetime], cached: tuple[datetime, datetime]
) -> tuple[datetime, datetime]:
    """Return the part of the requested range that must still be fetched.

    It starts at the cached range's end or at the start of the refresh
    window, whichever is earlier, and ends at the requested end.
    """
    end = requested[1]
    return min(cached[1], end - REFRESH_WINDOW), end


def _emptied(frame: Frame) -> Frame:
    return replace(frame, fields=[])


def trim_cached_frames(
    cached: Iterable[CachedFrame],
    start: datetime,
    end: datetime,
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
) -> list[Frame]:
    """Trim earlier frames to the reusable range start < time <= end.

    These frames go before the newly fetched ones. Descending frames are
    emptied here and come back from trim_cached_frames_ending() instead.
    Latest value frames are always emptied so they are fetched again.
    Frames of non time series queries are returned unchanged.
    """
    out = []
    for item in cached:
        if item.descending or item.kind is QueryKind.PROPERTY_VALUE:
            out.append(_emptied(item.frame))
        elif item.kind in TIME_SERIES_QUERY_KINDS:
            out.append(
                trim_time_series_frame(
                    item.frame,
                    start,
                    end,
                    last_observation=item.last_observation,
                    time_field_name=time_field_name,
                )
            )
        else:
            out.append(item.frame)
    return out


def trim_cached_frames_ending(
    cached: Iterable[CachedFrame],
    start: datetime,
    end: datetime,
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
) -> list[Frame]:
    """Trim earlier descending frames, which go after the newly fetched ones."""
    return [
        trim_time_series_frame(
            item.frame,
            start,
            end,
            last_observation=item.last_observation,
            descending=True,
            time_field_name=time_field_name,
        )
        for item in cached
        if item.descending
    ]
