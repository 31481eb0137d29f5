"""SiteWise response variants and their conversion to frames.

Each variant implements the Framer port: it resolves metadata through the
query context, then runs type inference, row extraction and frame assembly
in that order. Metadata failures propagate before any field is allocated.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields

from sitewise_framer.core.assembly import assemble_columns, assemble_frame
from sitewise_framer.core.config import FramerConfig
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError
from sitewise_framer.core.inference import field_type_for_property
from sitewise_framer.core.models import (
    AggregatedValue,
    Aggregates,
    BatchEntry,
    BatchError,
    FieldType,
    Frame,
    FrameMeta,
    PropertyMetadata,
    PropertyValue,
)
from sitewise_framer.core.ports import ResourceProvider
from sitewise_framer.core.rows import Row, extract_rows, to_datetime

logger = logging.getLogger(__name__)

# Output order of aggregate fields.
AGGREGATE_FIELDS = tuple(f.name for f in fields(Aggregates))


async def resolve_property(
    ctx: QueryContext, resources: ResourceProvider
) -> PropertyMetadata:
    """Resolve the query's property metadata, honouring cancellation."""
    return await ctx.run(resources.property(ctx))


def _log_rows(config: FramerConfig, frame_name: str, rows: Sequence[Row]) -> None:
    if config.log_rows and logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Extracted rows",
            extra={"frame": frame_name, "row_count": len(rows), "rows": repr(rows)},
        )


def series_frame(
    metadata: PropertyMetadata,
    values: Sequence[PropertyValue],
    config: FramerConfig,
    next_token: str | None = None,
    notices: tuple[str, ...] = (),
) -> Frame:
    """Build the time/value frame for one property's values."""
    field_type = field_type_for_property(
        metadata,
        (value.value for value in values),
        fallback=config.fallback_field_type,
    )
    rows = extract_rows(values)
    _log_rows(config, metadata.asset_name, rows)
    return assemble_frame(
        name=metadata.asset_name,
        value_field_name=metadata.property_name,
        field_type=field_type,
        rows=rows,
        time_field_name=config.time_field_name,
        meta=FrameMeta(next_token=next_token, notices=notices),
    )


@dataclass(frozen=True)
class AssetPropertyValue:
    """Latest value of one asset property.

    Attributes:
        property_value: The value, or None if the property was never set.
    """

    property_value: PropertyValue | None

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        metadata = await resolve_property(ctx, resources)
        values = [] if self.property_value is None else [self.property_value]
        return (series_frame(metadata, values, config),)


@dataclass(frozen=True)
class AssetPropertyValueHistory:
    """Historical values of one asset property, in source order."""

    values: tuple[PropertyValue, ...] = ()
    next_token: str | None = None

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        metadata = await resolve_property(ctx, resources)
        return (series_frame(metadata, self.values, config, self.next_token),)


@dataclass(frozen=True)
class InterpolatedAssetPropertyValues:
    """Interpolated values of one asset property at regular intervals."""

    values: tuple[PropertyValue, ...] = ()
    next_token: str | None = None

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        metadata = await resolve_property(ctx, resources)
        return (series_frame(metadata, self.values, config, self.next_token),)


@dataclass(frozen=True)
class AssetPropertyAggregates:
    """Aggregated values of one asset property.

    The frame holds the time field plus one FLOAT64 field per aggregate
    type present in any window, in AGGREGATE_FIELDS order.
    """

    values: tuple[AggregatedValue, ...] = ()
    next_token: str | None = None

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        metadata = await resolve_property(ctx, resources)

        times = [to_datetime(window.timestamp) for window in self.values]
        columns = []
        for name in AGGREGATE_FIELDS:
            cells = [getattr(window.value, name) for window in self.values]
            if any(cell is not None for cell in cells):
                columns.append((name, FieldType.FLOAT64, cells))

        _log_rows(config, metadata.asset_name, list(zip(times, self.values)))
        frame = assemble_columns(
            name=metadata.asset_name,
            times=times,
            columns=columns,
            time_field_name=config.time_field_name,
            meta=FrameMeta(next_token=self.next_token),
        )
        return (frame,)


@dataclass(frozen=True)
class BatchAssetPropertyValues:
    """Latest values of several asset properties fetched in one call.

    Produces one frame per successful entry. Failed entries are reported as
    notices on the first frame.
    """

    entries: tuple[BatchEntry, ...] = ()
    errors: tuple[BatchError, ...] = ()
    next_token: str | None = None

    def _metadata_for(
        self, properties: Mapping[str, PropertyMetadata]
    ) -> list[PropertyMetadata]:
        resolved = []
        for entry in self.entries:
            metadata = properties.get(entry.property_id)
            if metadata is None:
                raise MetadataResolutionError(
                    f"no metadata for property {entry.property_id}",
                    asset_id=entry.asset_id,
                    property_id=entry.property_id,
                )
            resolved.append(metadata)
        return resolved

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        properties = await ctx.run(resources.properties(ctx))
        resolved = self._metadata_for(properties)

        notices = tuple(
            f"{error.entry_id}: {error.error_code}: {error.error_message}"
            for error in self.errors
        )
        if notices and not self.entries:
            logger.warning(
                "Batch response has only failed entries",
                extra={"error_count": len(notices)},
            )

        frames = []
        for index, (entry, metadata) in enumerate(zip(self.entries, resolved)):
            values = [] if entry.property_value is None else [entry.property_value]
            frames.append(
                series_frame(
                    metadata,
                    values,
                    config,
                    next_token=self.next_token,
                    notices=notices if index == 0 else (),
                )
            )
        return tuple(frames)
