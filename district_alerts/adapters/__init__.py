"""
Adapters for District Alerts hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import MemoryKVStore, SQLiteKVStore
from .http.client import HttpFetcher

__all__ = ["MemoryKVStore", "SQLiteKVStore", "HttpFetcher"]
