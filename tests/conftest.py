"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

from sitewise_framer.adapters.resources.in_memory import InMemoryResourceProvider
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError
from sitewise_framer.core.models import (
    DoubleValue,
    PropertyDataType,
    PropertyMetadata,
    PropertyValue,
    Timestamp,
)
from tests.helpers import BlockingResourceProvider, FailingResourceProvider


@pytest.fixture
def catalog_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for catalog tests."""
    return str(tmp_path / "catalog.db")


@pytest.fixture
def pump_temperature() -> PropertyMetadata:
    """Metadata for the Pump-1 Temperature property."""
    return PropertyMetadata(
        asset_id="asset-pump-1",
        asset_name="Pump-1",
        property_id="prop-temperature",
        property_name="Temperature",
        data_type=PropertyDataType.DOUBLE,
        unit="Celsius",
    )


@pytest.fixture
def pump_running() -> PropertyMetadata:
    """Metadata for the Pump-1 Running property."""
    return PropertyMetadata(
        asset_id="asset-pump-1",
        asset_name="Pump-1",
        property_id="prop-running",
        property_name="Running",
        data_type=PropertyDataType.BOOLEAN,
    )


@pytest.fixture
def temperature_value() -> PropertyValue:
    """A double value of 42.5 at 2023-11-14T22:13:20Z."""
    return PropertyValue(
        value=DoubleValue(42.5),
        timestamp=Timestamp(time_in_seconds=1700000000),
    )


@pytest.fixture
def ctx() -> QueryContext:
    """A live query context without deadline."""
    return QueryContext()


@pytest.fixture
def resources(pump_temperature: PropertyMetadata) -> InMemoryResourceProvider:
    """In-memory provider bound to the Temperature property."""
    return InMemoryResourceProvider([pump_temperature])


@pytest.fixture
def failing_resources() -> FailingResourceProvider:
    """Provider that fails with MetadataResolutionError."""
    return FailingResourceProvider(
        MetadataResolutionError("unknown asset", asset_id="asset-missing")
    )


@pytest.fixture
def blocking_resources(pump_temperature: PropertyMetadata) -> BlockingResourceProvider:
    """Provider that blocks until released."""
    return BlockingResourceProvider(pump_temperature)
