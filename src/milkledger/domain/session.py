"""Session lifecycle: one sync coordinator per signed-in identity."""

import logging
from dataclasses import dataclass

from milkledger.config import Settings
from milkledger.database.base import RemoteStoreError
from milkledger.database.factories import create_local_cache, create_remote_store
from milkledger.domain.errors import ValidationError
from milkledger.domain.sync import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """Authenticated identity; ``id`` is the owner key of all its rows."""

    id: str
    email: str = ""


def open_session(user: User, settings: Settings) -> SyncCoordinator:
    """Build the data context for a user and load their data.

    An unusable remote URL is logged and the session runs offline.

    Raises:
        ValidationError: If the user has no id
    """
    if not user.id or not user.id.strip():
        raise ValidationError("A user id is required to open a session")

    cache = create_local_cache(user.id, settings.cache_dir, settings.cache_slot)
    remote = None
    if settings.remote_url:
        try:
            remote = create_remote_store(settings.remote_url)
        except RemoteStoreError as exc:
            logger.warning("Remote store unavailable, running offline: %s", exc)

    coordinator = SyncCoordinator(
        owner_id=user.id,
        cache=cache,
        remote=remote,
        probe_timeout=settings.probe_timeout,
    )
    coordinator.load()
    return coordinator


def close_session(coordinator: SyncCoordinator) -> None:
    """Tear down the data context at logout."""
    coordinator.close()
    logger.debug("Closed session for %s", coordinator.owner_id)
