"""Resource provider adapters implementing the ResourceProvider port."""

from sitewise_framer.adapters.resources.in_memory import InMemoryResourceProvider
from sitewise_framer.adapters.resources.sqlite import SQLiteResourceProvider

__all__ = [
    "InMemoryResourceProvider",
    "SQLiteResourceProvider",
]
