"""Tests for SQLite resource provider adapter."""

from collections.abc import AsyncGenerator

import pytest

from sitewise_framer.adapters.resources.sqlite import SQLiteResourceProvider
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError, QueryCancelledError
from sitewise_framer.core.models import PropertyMetadata
from sitewise_framer.core.ports import ResourceProvider
from sitewise_framer.core.producer import produce_frames
from sitewise_framer.core.responses import AssetPropertyValue

# All tests in this module are tier 2 (integration tests with file I/O)
pytestmark = pytest.mark.tier(2)


@pytest.fixture
async def memory_catalog(
    pump_temperature: PropertyMetadata, pump_running: PropertyMetadata
) -> AsyncGenerator[SQLiteResourceProvider]:
    """In-memory catalog bound to Temperature, with proper cleanup."""
    provider = SQLiteResourceProvider(":memory:", property_id="prop-temperature")
    await provider.write(pump_temperature)
    await provider.write(pump_running)
    yield provider
    await provider.close()


@pytest.mark.tra("Adapter.SQLiteResources.ImplementsResourceProvider")
class TestSQLiteResourceProvider:
    """Tests for SQLiteResourceProvider adapter."""

    @pytest.mark.storage
    def test_implements_resource_provider_port(self) -> None:
        assert isinstance(SQLiteResourceProvider(":memory:"), ResourceProvider)

    @pytest.mark.storage
    async def test_property_round_trip(
        self, ctx, memory_catalog, pump_temperature
    ) -> None:
        """Written metadata, including declared type and unit, reads back."""
        assert await memory_catalog.property(ctx) == pump_temperature

    @pytest.mark.storage
    async def test_properties_returns_all(self, ctx, memory_catalog) -> None:
        result = await memory_catalog.properties(ctx)

        assert sorted(result) == ["prop-running", "prop-temperature"]
        assert result["prop-running"].data_type is not None

    @pytest.mark.storage
    async def test_write_replaces_existing(
        self, ctx, memory_catalog, pump_temperature
    ) -> None:
        renamed = PropertyMetadata(
            asset_id=pump_temperature.asset_id,
            asset_name="Pump-1b",
            property_id=pump_temperature.property_id,
            property_name="Temp",
        )

        await memory_catalog.write(renamed)

        assert await memory_catalog.count() == 2
        assert await memory_catalog.property(ctx) == renamed

    @pytest.mark.storage
    async def test_unknown_property_raises(self, ctx, catalog_db_path) -> None:
        provider = SQLiteResourceProvider(catalog_db_path, property_id="missing")

        with pytest.raises(MetadataResolutionError, match="missing"):
            await provider.property(ctx)

    @pytest.mark.storage
    async def test_unbound_provider_raises(self, ctx, catalog_db_path) -> None:
        with pytest.raises(MetadataResolutionError):
            await SQLiteResourceProvider(catalog_db_path).property(ctx)

    @pytest.mark.storage
    async def test_file_database_persists_between_providers(
        self, ctx, catalog_db_path, pump_temperature, pump_running
    ) -> None:
        writer = SQLiteResourceProvider(catalog_db_path)
        await writer.write(pump_temperature)
        await writer.write(pump_running)

        reader = SQLiteResourceProvider(
            catalog_db_path, property_ids=["prop-running", "prop-absent"]
        )
        result = await reader.properties(ctx)

        assert list(result) == ["prop-running"]

    @pytest.mark.storage
    async def test_cancelled_context_raises(self, memory_catalog) -> None:
        ctx = QueryContext()
        ctx.cancel()

        with pytest.raises(QueryCancelledError):
            await memory_catalog.property(ctx)

    @pytest.mark.storage
    async def test_produces_frames_from_catalog(
        self, ctx, memory_catalog, temperature_value
    ) -> None:
        frames = await produce_frames(
            ctx, AssetPropertyValue(temperature_value), memory_catalog
        )

        assert frames[0].name == "Pump-1"
        assert frames[0].fields[1].name == "Temperature"

    @pytest.mark.storage
    async def test_properties_filtered_in_query(
        self, ctx, catalog_db_path, pump_temperature, pump_running
    ) -> None:
        """Only the requested rows come back, ordered by property id."""
        writer = SQLiteResourceProvider(catalog_db_path)
        await writer.write(pump_temperature)
        await writer.write(pump_running)

        reader = SQLiteResourceProvider(
            catalog_db_path, property_ids=["prop-temperature", "prop-running"]
        )
        result = await reader.properties(ctx)

        assert list(result) == ["prop-running", "prop-temperature"]
        assert result["prop-temperature"] == pump_temperature

    @pytest.mark.storage
    async def test_empty_property_ids_resolve_nothing(
        self, ctx, catalog_db_path, pump_temperature
    ) -> None:
        writer = SQLiteResourceProvider(catalog_db_path)
        await writer.write(pump_temperature)

        reader = SQLiteResourceProvider(catalog_db_path, property_ids=[])

        assert await reader.properties(ctx) == {}

    @pytest.mark.storage
    async def test_unreadable_catalog_raises_resolution_error(
        self, ctx, tmp_path
    ) -> None:
        path = tmp_path / "not-a-catalog.db"
        path.write_bytes(b"this is not a sqlite database file" * 8)
        provider = SQLiteResourceProvider(str(path), property_id="prop-temperature")

        with pytest.raises(MetadataResolutionError, match="catalog"):
            await provider.properties(ctx)

    @pytest.mark.storage
    async def test_close_discards_memory_catalog(
        self, memory_catalog: SQLiteResourceProvider
    ) -> None:
        assert await memory_catalog.count() == 2

        await memory_catalog.close()

        assert await memory_catalog.count() == 0
