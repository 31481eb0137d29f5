"""Port interfaces for frame production.

These protocols define the contracts that resource providers and response
framers must implement. The core depends only on these interfaces, not on
concrete adapters.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from sitewise_framer.core.config import FramerConfig
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.models import Frame, PropertyMetadata


@runtime_checkable
class ResourceProvider(Protocol):
    """Port for resolving asset/property metadata for one query.

    A provider is bound to the query it serves: it already knows which asset
    and property the response belongs to. Lookups may perform network I/O
    and may fail; the producer treats any failure as fatal for the call.
    Examples: InMemoryResourceProvider, SQLiteResourceProvider.
    """

    async def property(self, ctx: QueryContext) -> PropertyMetadata:
        """Resolve metadata for the query's asset property.

        Raises:
            MetadataResolutionError: If the asset or property is unknown.
        """
        ...

    async def properties(self, ctx: QueryContext) -> Mapping[str, PropertyMetadata]:
        """Resolve metadata for every property of a batch query.

        Returns:
            Mapping of property id to PropertyMetadata.
        """
        ...


@runtime_checkable
class Framer(Protocol):
    """Port for response variants that know how to become frames."""

    async def frames(
        self,
        ctx: QueryContext,
        resources: ResourceProvider,
        config: FramerConfig,
    ) -> tuple[Frame, ...]:
        """Convert the response into frames."""
        ...
