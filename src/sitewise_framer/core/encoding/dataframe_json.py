"""Data frame JSON encoder.

Frames are encoded as {"schema": ..., "data": {"values": [...]}} objects,
one column list per field. Time cells become epoch milliseconds.
"""

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sitewise_framer.core.models import Field, FieldType, Frame


def _encode_cell(field: Field, value: object) -> Any:
    if value is None:
        return None
    if field.type is FieldType.TIME and isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    return value


def frame_to_dict(frame: Frame) -> dict[str, Any]:
    """Convert a frame to its JSON-ready dict.

    Args:
        frame: The frame to convert.

    Returns:
        Dict with "schema" and "data" keys.
    """
    schema: dict[str, Any] = {
        "name": frame.name,
        "refId": frame.ref_id,
        "fields": [],
    }
    for f in frame.fields:
        field_schema: dict[str, Any] = {"name": f.name, "type": f.type.value}
        if f.labels:
            field_schema["labels"] = dict(f.labels)
        schema["fields"].append(field_schema)

    meta: dict[str, Any] = {}
    if frame.meta.next_token is not None:
        meta["custom"] = {"nextToken": frame.meta.next_token}
    if frame.meta.notices:
        meta["notices"] = [
            {"severity": "warning", "text": text} for text in frame.meta.notices
        ]
    if meta:
        schema["meta"] = meta

    values = [[_encode_cell(f, v) for v in f.values] for f in frame.fields]
    return {"schema": schema, "data": {"values": values}}


def encode_frames(frames: Iterable[Frame]) -> str:
    """Encode frames to a JSON array string.

    Returns:
        JSON array with one object per frame; "[]" if no frames.
    """
    return json.dumps([frame_to_dict(frame) for frame in frames])


def encode_frames_ndjson(frames: Iterable[Frame]) -> str:
    """Encode frames to newline-delimited JSON, one frame per line.

    Returns:
        NDJSON string, or empty string if no frames.
    """
    lines = [json.dumps(frame_to_dict(frame)) for frame in frames]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
