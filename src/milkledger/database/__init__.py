"""Database layer for milkledger application."""

from milkledger.database.base import RemoteStore, RemoteStoreError
from milkledger.database.local_cache import LocalCache
from milkledger.database.factories import create_local_cache, create_remote_store

__all__ = [
    "RemoteStore",
    "RemoteStoreError",
    "LocalCache",
    "create_local_cache",
    "create_remote_store",
]
