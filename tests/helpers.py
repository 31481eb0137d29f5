"""Resource provider test doubles shared by unit, integration and BDD tests."""

import asyncio
from collections.abc import Mapping

from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.models import PropertyMetadata


class FailingResourceProvider:
    """Provider whose lookups always raise the given error."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    async def property(self, ctx: QueryContext) -> PropertyMetadata:
        self.calls += 1
        raise self.error

    async def properties(self, ctx: QueryContext) -> Mapping[str, PropertyMetadata]:
        self.calls += 1
        raise self.error


class BlockingResourceProvider:
    """Provider whose lookups wait until released.

    The started event is set once a lookup is in flight.
    """

    def __init__(self, metadata: PropertyMetadata) -> None:
        self.metadata = metadata
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.cancelled = False

    async def property(self, ctx: QueryContext) -> PropertyMetadata:
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.metadata

    async def properties(self, ctx: QueryContext) -> Mapping[str, PropertyMetadata]:
        return {self.metadata.property_id: await self.property(ctx)}
