"""
Mock data store: key/value storage backends + table-level store + fixtures.
"""

from .data_store import MockDataStore
from .fixtures import HEADERS, Tables, fixture_rows
from .storage import InMemoryStorage, JsonFileStorage

__all__ = [
    "HEADERS",
    "InMemoryStorage",
    "JsonFileStorage",
    "MockDataStore",
    "Tables",
    "fixture_rows",
]
