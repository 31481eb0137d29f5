"""Convert AWS IoT SiteWise property value responses into data frames."""

from sitewise_framer.adapters.resources import (
    InMemoryResourceProvider,
    SQLiteResourceProvider,
)
from sitewise_framer.core.config import FramerConfig
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import (
    FieldTypeError,
    FramerError,
    MetadataResolutionError,
    QueryCancelledError,
    UnsupportedResponseError,
)
from sitewise_framer.core.models import (
    Field,
    FieldType,
    Frame,
    FrameMeta,
    PropertyMetadata,
    PropertyValue,
)
from sitewise_framer.core.ports import Framer, ResourceProvider
from sitewise_framer.core.producer import produce_frames, produce_frames_sync
from sitewise_framer.core.responses import (
    AssetPropertyAggregates,
    AssetPropertyValue,
    AssetPropertyValueHistory,
    BatchAssetPropertyValues,
    InterpolatedAssetPropertyValues,
)

__all__ = [
    "AssetPropertyAggregates",
    "AssetPropertyValue",
    "AssetPropertyValueHistory",
    "BatchAssetPropertyValues",
    "Field",
    "FieldType",
    "FieldTypeError",
    "Frame",
    "FrameMeta",
    "Framer",
    "FramerConfig",
    "FramerError",
    "InMemoryResourceProvider",
    "InterpolatedAssetPropertyValues",
    "MetadataResolutionError",
    "PropertyMetadata",
    "PropertyValue",
    "QueryCancelledError",
    "QueryContext",
    "ResourceProvider",
    "SQLiteResourceProvider",
    "UnsupportedResponseError",
    "produce_frames",
    "produce_frames_sync",
]
