"""
Storage adapters for District Alerts hexagonal architecture.

This module contains key-value storage adapters backing the
boundary cache: an in-memory store and a SQLite store.
"""

from .memory_kv import MemoryKVStore
from .sqlite_kv import SQLiteKVStore

__all__ = ["MemoryKVStore", "SQLiteKVStore"]
