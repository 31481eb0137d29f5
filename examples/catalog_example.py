"""Example: frame a SiteWise response using an SQLite metadata catalog.

Run with:
    python examples/catalog_example.py

Prints the data frame JSON for a latest-value response and a history
response of the same property. Set LOG_ROWS=1 to dump extracted rows.
"""

import asyncio
import logging
import os

from sitewise_framer import (
    FramerConfig,
    PropertyMetadata,
    QueryContext,
    SQLiteResourceProvider,
    produce_frames,
)
from sitewise_framer.adapters.sitewise_api import parse_response
from sitewise_framer.core.encoding import encode_frames
from sitewise_framer.core.models import PropertyDataType

LATEST = {
    "propertyValue": {
        "value": {"doubleValue": 42.5},
        "timestamp": {"timeInSeconds": 1700000000, "offsetInNanos": 0},
        "quality": "GOOD",
    }
}

HISTORY = {
    "assetPropertyValueHistory": [
        {"value": {"doubleValue": 41.0}, "timestamp": {"timeInSeconds": 1699999940}},
        {"value": {}, "timestamp": {"timeInSeconds": 1699999970}},
        {"value": {"doubleValue": 42.5}, "timestamp": {"timeInSeconds": 1700000000}},
    ],
    "nextToken": "page-2",
}


async def main() -> None:
    config = FramerConfig(log_rows=os.environ.get("LOG_ROWS") == "1")
    catalog = SQLiteResourceProvider(":memory:", property_id="prop-temperature")
    await catalog.write(
        PropertyMetadata(
            asset_id="asset-pump-1",
            asset_name="Pump-1",
            property_id="prop-temperature",
            property_name="Temperature",
            data_type=PropertyDataType.DOUBLE,
        )
    )

    try:
        for operation, payload in [
            ("GetAssetPropertyValue", LATEST),
            ("GetAssetPropertyValueHistory", HISTORY),
        ]:
            response = parse_response(operation, payload)
            frames = await produce_frames(
                QueryContext(timeout=5.0), response, catalog, config
            )
            print(operation, encode_frames(frames))
    finally:
        await catalog.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
