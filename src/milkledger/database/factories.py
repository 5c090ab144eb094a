"""Factory functions for creating the local cache and remote store."""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from milkledger.database.local_cache import DEFAULT_SLOT, LocalCache
from milkledger.database.sqlalchemy_db import SQLAlchemyRemoteStore


def default_cache_dir() -> Path:
    """Return the default cache directory (~/.milkledger)."""
    return Path.home() / ".milkledger"


def create_local_cache(
    owner_id: str, cache_dir: Optional[str | Path] = None, slot: str = DEFAULT_SLOT
) -> LocalCache:
    """Create the local cache slot for one owner.

    Args:
        owner_id: Owner key; each owner gets a separate slot file
        cache_dir: Directory holding slot files. If None, checks
            MILKLEDGER_CACHE_DIR environment variable, then defaults to ~/.milkledger
        slot: Slot name prefix

    Returns:
        LocalCache instance
    """
    if cache_dir is None:
        cache_dir = os.environ.get("MILKLEDGER_CACHE_DIR")

    if cache_dir is None:
        cache_dir = default_cache_dir()

    # Percent-encoding is reversible, so distinct owners never share a file.
    safe_owner = quote(owner_id, safe="")
    return LocalCache(Path(cache_dir) / f"{slot}-{safe_owner}.json")


def create_remote_store(database_url: Optional[str] = None) -> Optional[SQLAlchemyRemoteStore]:
    """Create the remote store, if one is configured.

    Args:
        database_url: SQLAlchemy URL. If None, checks MILKLEDGER_REMOTE_URL
            environment variable.

    Returns:
        SQLAlchemyRemoteStore, or None when no remote is configured

    Raises:
        RemoteStoreError: If the URL cannot be used
    """
    if database_url is None:
        database_url = os.environ.get("MILKLEDGER_REMOTE_URL")

    if not database_url:
        return None

    return SQLAlchemyRemoteStore(database_url)
