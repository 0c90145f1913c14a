"""
Port interfaces for District Alerts hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .fetch import FetchPort
from .kvstore import KVStorePort

__all__ = ["FetchPort", "KVStorePort"]
