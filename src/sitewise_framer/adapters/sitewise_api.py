"""Adapter from decoded SiteWise API payloads to response variants.

Payloads are the dicts returned by the AWS SDK (boto3/botocore) for the
IoT SiteWise data-plane calls. Decoding from the wire has already happened;
this module only maps field names and shapes onto the core models.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from sitewise_framer.core.models import (
    AggregatedValue,
    Aggregates,
    BatchEntry,
    BatchError,
    BooleanValue,
    DoubleValue,
    IntegerValue,
    PropertyValue,
    Quality,
    StringValue,
    Timestamp,
    Variant,
)
from sitewise_framer.core.responses import (
    AssetPropertyAggregates,
    AssetPropertyValue,
    AssetPropertyValueHistory,
    BatchAssetPropertyValues,
    InterpolatedAssetPropertyValues,
)

Payload = Mapping[str, Any]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_VARIANT_KEYS: dict[str, Callable[[Any], Variant]] = {
    "doubleValue": lambda v: DoubleValue(float(v)),
    "integerValue": lambda v: IntegerValue(int(v)),
    "stringValue": lambda v: StringValue(str(v)),
    "booleanValue": lambda v: BooleanValue(bool(v)),
}

_AGGREGATE_KEYS = {
    "average": "average",
    "count": "count",
    "maximum": "maximum",
    "minimum": "minimum",
    "sum": "sum",
    "standardDeviation": "standard_deviation",
}


def parse_variant(payload: Payload | None) -> Variant | None:
    """Map a SiteWise Variant dict to a tagged variant.

    Returns None when no value field is populated (including nullValue).

    Raises:
        ValueError: If more than one value field is populated.
    """
    if not payload:
        return None
    present = [key for key in _VARIANT_KEYS if payload.get(key) is not None]
    if len(present) > 1:
        raise ValueError(f"variant has more than one value: {present}")
    if not present:
        return None
    key = present[0]
    return _VARIANT_KEYS[key](payload[key])


def parse_timestamp(payload: Payload | datetime) -> Timestamp:
    """Map a TimeInNanos dict, or a datetime, to a Timestamp.

    Naive datetimes are taken as UTC.
    """
    if isinstance(payload, datetime):
        if payload.tzinfo is None:
            payload = payload.replace(tzinfo=UTC)
        seconds = (payload - _EPOCH) // timedelta(seconds=1)
        return Timestamp(
            time_in_seconds=seconds,
            offset_in_nanos=payload.microsecond * 1000,
        )
    return Timestamp(
        time_in_seconds=int(payload["timeInSeconds"]),
        offset_in_nanos=int(payload.get("offsetInNanos") or 0),
    )


def _parse_quality(value: str | None) -> Quality | None:
    return Quality(value) if value else None


def parse_property_value(payload: Payload) -> PropertyValue:
    """Map an AssetPropertyValue dict to a PropertyValue."""
    return PropertyValue(
        value=parse_variant(payload.get("value")),
        timestamp=parse_timestamp(payload["timestamp"]),
        quality=_parse_quality(payload.get("quality")),
    )


def parse_aggregated_value(payload: Payload) -> AggregatedValue:
    aggregates = payload.get("value") or {}
    return AggregatedValue(
        timestamp=parse_timestamp(payload["timestamp"]),
        value=Aggregates(
            **{
                name: float(aggregates[key])
                for key, name in _AGGREGATE_KEYS.items()
                if aggregates.get(key) is not None
            }
        ),
        resolution=payload.get("resolution"),
        quality=_parse_quality(payload.get("quality")),
    )


def parse_get_asset_property_value(payload: Payload) -> AssetPropertyValue:
    value = payload.get("propertyValue")
    return AssetPropertyValue(
        property_value=None if value is None else parse_property_value(value)
    )


def parse_get_asset_property_value_history(
    payload: Payload,
) -> AssetPropertyValueHistory:
    return AssetPropertyValueHistory(
        values=tuple(
            parse_property_value(v) for v in payload.get("assetPropertyValueHistory", [])
        ),
        next_token=payload.get("nextToken"),
    )


def parse_get_interpolated_asset_property_values(
    payload: Payload,
) -> InterpolatedAssetPropertyValues:
    return InterpolatedAssetPropertyValues(
        values=tuple(
            parse_property_value(v)
            for v in payload.get("interpolatedAssetPropertyValues", [])
        ),
        next_token=payload.get("nextToken"),
    )


def parse_get_asset_property_aggregates(payload: Payload) -> AssetPropertyAggregates:
    return AssetPropertyAggregates(
        values=tuple(
            parse_aggregated_value(v) for v in payload.get("aggregatedValues", [])
        ),
        next_token=payload.get("nextToken"),
    )


def parse_batch_get_asset_property_value(
    payload: Payload, requested: Mapping[str, tuple[str, str]]
) -> BatchAssetPropertyValues:
    """Map a BatchGetAssetPropertyValue result.

    Success entries only carry their entry id, so the request's entries are
    needed to know which asset property each one belongs to.

    Args:
        payload: The decoded response.
        requested: Entry id to (asset_id, property_id), from the request.

    Raises:
        KeyError: If a success entry id was not in the request.
    """
    entries = []
    for success in payload.get("successEntries", []):
        entry_id = success["entryId"]
        asset_id, property_id = requested[entry_id]
        value = success.get("assetPropertyValue")
        entries.append(
            BatchEntry(
                entry_id=entry_id,
                asset_id=asset_id,
                property_id=property_id,
                property_value=None if value is None else parse_property_value(value),
            )
        )

    errors = tuple(
        BatchError(
            entry_id=error["entryId"],
            error_code=error.get("errorCode", ""),
            error_message=error.get("errorMessage", ""),
        )
        for error in payload.get("errorEntries", [])
    )
    return BatchAssetPropertyValues(
        entries=tuple(entries),
        errors=errors,
        next_token=payload.get("nextToken"),
    )


_PARSERS: dict[str, Callable[[Payload], object]] = {
    "GetAssetPropertyValue": parse_get_asset_property_value,
    "GetAssetPropertyValueHistory": parse_get_asset_property_value_history,
    "GetInterpolatedAssetPropertyValues": parse_get_interpolated_asset_property_values,
    "GetAssetPropertyAggregates": parse_get_asset_property_aggregates,
}


def parse_response(operation: str, payload: Payload) -> object:
    """Map the payload of a single-property SiteWise operation.

    Args:
        operation: API operation name, e.g. "GetAssetPropertyValue".
        payload: The decoded response.

    Raises:
        ValueError: If the operation is not supported. Batch results need
            parse_batch_get_asset_property_value.
    """
    parser = _PARSERS.get(operation)
    if parser is None:
        raise ValueError(f"unsupported operation: {operation}")
    return parser(payload)
