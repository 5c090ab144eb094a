"""Runtime settings sourced from environment variables."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from milkledger.database.factories import default_cache_dir
from milkledger.database.local_cache import DEFAULT_SLOT
from milkledger.domain.sync import DEFAULT_PROBE_TIMEOUT


@dataclass(frozen=True)
class Settings:
    """Settings for one milkledger session.

    Attributes:
        remote_url: SQLAlchemy URL of the remote store; None means offline only.
        cache_dir: Directory of the local cache slots.
        cache_slot: Slot name prefix of the cache file.
        probe_timeout: Seconds before the connectivity probe gives up.
        user: Owner key of the active identity.
    """

    remote_url: Optional[str] = None
    cache_dir: Path = default_cache_dir()
    cache_slot: str = DEFAULT_SLOT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    user: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from MILKLEDGER_* environment variables.

        Raises:
            ValueError: If MILKLEDGER_PROBE_TIMEOUT is not a positive number
        """
        raw_timeout = os.getenv("MILKLEDGER_PROBE_TIMEOUT")
        probe_timeout = DEFAULT_PROBE_TIMEOUT
        if raw_timeout:
            try:
                probe_timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"Invalid MILKLEDGER_PROBE_TIMEOUT '{raw_timeout}'")
            if probe_timeout <= 0:
                raise ValueError("MILKLEDGER_PROBE_TIMEOUT must be positive")

        raw_cache_dir = os.getenv("MILKLEDGER_CACHE_DIR")
        return cls(
            remote_url=os.getenv("MILKLEDGER_REMOTE_URL") or None,
            cache_dir=Path(raw_cache_dir).expanduser() if raw_cache_dir else default_cache_dir(),
            cache_slot=os.getenv("MILKLEDGER_CACHE_SLOT") or DEFAULT_SLOT,
            probe_timeout=probe_timeout,
            user=os.getenv("MILKLEDGER_USER") or None,
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "cache_dir" in values:
            values["cache_dir"] = Path(values["cache_dir"]).expanduser()
        return replace(self, **values)
