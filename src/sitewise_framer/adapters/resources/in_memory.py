"""In-memory resource provider."""

from collections.abc import Iterable, Mapping

from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError
from sitewise_framer.core.models import PropertyMetadata


class InMemoryResourceProvider:
    """In-memory implementation of ResourceProvider.

    Holds a fixed set of property metadata and is bound to one property for
    single-property queries. Suitable for testing and for callers that
    already hold the metadata.
    """

    def __init__(
        self,
        properties: Iterable[PropertyMetadata] = (),
        property_id: str | None = None,
    ) -> None:
        """Create a provider.

        Args:
            properties: Known property metadata.
            property_id: Property resolved by property(). Defaults to the
                only known property when exactly one is given.
        """
        self._properties = {p.property_id: p for p in properties}
        if property_id is None and len(self._properties) == 1:
            property_id = next(iter(self._properties))
        self._property_id = property_id

    async def property(self, ctx: QueryContext) -> PropertyMetadata:
        """Resolve metadata for the bound property."""
        ctx.check()
        metadata = self._properties.get(self._property_id or "")
        if metadata is None:
            raise MetadataResolutionError(
                f"unknown property {self._property_id}",
                property_id=self._property_id,
            )
        return metadata

    async def properties(self, ctx: QueryContext) -> Mapping[str, PropertyMetadata]:
        """Resolve metadata for every known property."""
        ctx.check()
        return dict(self._properties)
