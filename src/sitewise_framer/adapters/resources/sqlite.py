"""SQLite resource provider.

Reads asset property metadata from a local SQLite catalog. The catalog is a
lookup source only; nothing is cached in memory between calls.
"""

import asyncio
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError
from sitewise_framer.core.models import PropertyDataType, PropertyMetadata

_CATALOG_SCHEMA = """
CREATE TABLE IF NOT EXISTS asset_properties (
    property_id TEXT PRIMARY KEY,
    property_name TEXT NOT NULL,
    asset_id TEXT NOT NULL,
    asset_name TEXT NOT NULL,
    data_type TEXT,
    unit TEXT
);
CREATE INDEX IF NOT EXISTS idx_asset_properties_asset ON asset_properties(asset_id);
"""

_UPSERT_PROPERTY = """
INSERT OR REPLACE INTO asset_properties
    (property_id, property_name, asset_id, asset_name, data_type, unit)
VALUES (?, ?, ?, ?, ?, ?)
"""

_SELECT_COLUMNS = """
SELECT asset_id, asset_name, property_id, property_name, data_type, unit
FROM asset_properties
"""

_SELECT_PROPERTY = _SELECT_COLUMNS + "WHERE property_id = ?"

_SELECT_ALL = _SELECT_COLUMNS + "ORDER BY property_id"

_COUNT_PROPERTIES = """
SELECT COUNT(*) FROM asset_properties
"""


def _select_in(count: int) -> str:
    placeholders = ", ".join("?" * count)
    return _SELECT_COLUMNS + f"WHERE property_id IN ({placeholders}) ORDER BY property_id"


def _row_to_metadata(row: Sequence[Any]) -> PropertyMetadata:
    return PropertyMetadata(
        asset_id=row[0],
        asset_name=row[1],
        property_id=row[2],
        property_name=row[3],
        data_type=PropertyDataType(row[4]) if row[4] else None,
        unit=row[5],
    )


class SQLiteResourceProvider:
    """SQLite implementation of ResourceProvider.

    Looks up property metadata with aiosqlite for non-blocking access.

    A :memory: catalog lives only as long as its connection, so the provider
    keeps that one connection open until close(). File catalogs open a
    connection per call and switch the file to WAL mode on first use.

    Example:
        ```python
        provider = SQLiteResourceProvider("catalog.db", property_id="prop-1")
        await provider.write(metadata)
        frames = await produce_frames(ctx, response, provider)
        ```
    """

    def __init__(
        self,
        db_path: str,
        property_id: str | None = None,
        property_ids: Iterable[str] | None = None,
    ) -> None:
        """Create a provider.

        Args:
            db_path: SQLite database path, or ":memory:".
            property_id: Property resolved by property().
            property_ids: Properties resolved by properties(). None means
                every property in the catalog.
        """
        self._db_path = db_path
        self._property_id = property_id
        self._property_ids = None if property_ids is None else list(property_ids)
        self._schema_ready = False
        self._schema_lock: asyncio.Lock | None = None
        self._memory_db: aiosqlite.Connection | None = None

    @property
    def _in_memory(self) -> bool:
        return self._db_path == ":memory:"

    async def _create_schema(self) -> None:
        # Created on first use so the lock binds to the running loop.
        if self._schema_lock is None:
            self._schema_lock = asyncio.Lock()
        async with self._schema_lock:
            if self._schema_ready:
                return
            if self._in_memory:
                self._memory_db = await aiosqlite.connect(self._db_path)
                await self._memory_db.executescript(_CATALOG_SCHEMA)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(_CATALOG_SCHEMA)
            self._schema_ready = True

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a catalog connection, closing it afterwards unless in memory."""
        if not self._schema_ready:
            await self._create_schema()
        if self._in_memory:
            if self._memory_db is None:
                raise RuntimeError("memory catalog connection not open")
            yield self._memory_db
            return
        db = await aiosqlite.connect(self._db_path)
        try:
            yield db
        finally:
            await db.close()

    async def _fetch(
        self, sql: str, params: Sequence[Any] = (), property_id: str | None = None
    ) -> list[Any]:
        try:
            async with self._connection() as db:
                async with db.execute(sql, params) as cursor:
                    return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise MetadataResolutionError(
                f"catalog lookup failed: {exc}", property_id=property_id
            ) from exc

    async def write(self, metadata: PropertyMetadata) -> None:
        """Insert or replace a property's metadata in the catalog."""
        async with self._connection() as db:
            await db.execute(
                _UPSERT_PROPERTY,
                (
                    metadata.property_id,
                    metadata.property_name,
                    metadata.asset_id,
                    metadata.asset_name,
                    metadata.data_type.value if metadata.data_type else None,
                    metadata.unit,
                ),
            )
            await db.commit()

    async def count(self) -> int:
        """Return the number of properties in the catalog."""
        async with self._connection() as db:
            async with db.execute(_COUNT_PROPERTIES) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def property(self, ctx: QueryContext) -> PropertyMetadata:
        """Resolve metadata for the bound property.

        Raises:
            MetadataResolutionError: If the property is not in the catalog
                or the catalog cannot be read.
        """
        ctx.check()
        if self._property_id is None:
            raise MetadataResolutionError("no property bound to this provider")
        rows = await self._fetch(
            _SELECT_PROPERTY, (self._property_id,), property_id=self._property_id
        )
        if not rows:
            raise MetadataResolutionError(
                f"unknown property {self._property_id}",
                property_id=self._property_id,
            )
        return _row_to_metadata(rows[0])

    async def properties(self, ctx: QueryContext) -> Mapping[str, PropertyMetadata]:
        """Resolve metadata for the requested properties.

        Properties missing from the catalog are left out of the mapping.
        """
        ctx.check()
        if self._property_ids is None:
            rows = await self._fetch(_SELECT_ALL)
        elif not self._property_ids:
            return {}
        else:
            rows = await self._fetch(
                _select_in(len(self._property_ids)), self._property_ids
            )
        return {row[2]: _row_to_metadata(row) for row in rows}

    async def close(self) -> None:
        """Close the :memory: connection; the catalog is gone afterwards."""
        if self._memory_db is not None:
            await self._memory_db.close()
            self._memory_db = None
            self._schema_ready = False
