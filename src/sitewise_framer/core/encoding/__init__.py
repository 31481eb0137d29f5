"""Encoders for frames."""

from sitewise_framer.core.encoding.dataframe_json import (
    encode_frames,
    encode_frames_ndjson,
    frame_to_dict,
)

__all__ = [
    "encode_frames",
    "encode_frames_ndjson",
    "frame_to_dict",
]
