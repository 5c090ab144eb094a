"""Sync coordinator: the data-access context of one signed-in owner.

The coordinator owns the authoritative in-memory dataset and its durable
local cache, and mirrors every change to the remote store on a best-effort
basis:

* every mutation is applied to memory and the local cache first, then sent
  to the remote store only if the last probe said we are online;
* a failed remote write is logged and dropped. There is no pending-write
  queue and no retry; the local copy is never rolled back;
* ``load()`` pulls the remote state and overwrites memory and cache with it
  (remote wins). When the remote has no people for the owner but the cache
  is not empty, the cache is bulk-uploaded first;
* no public operation raises for connectivity or remote failures. They
  degrade to offline mode or are logged.

The coordinator is single-threaded and unlocked: concurrent mutations are
last-write-wins in memory.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Callable, Optional

from milkledger.database.base import RemoteStore, RemoteStoreError
from milkledger.database.local_cache import LocalCache
from milkledger.domain.entities import (
    AppData,
    CityEntry,
    Collection,
    DairyEntry,
    Payment,
    Person,
    Record,
    VillageEntry,
    new_id,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 8.0


class ConnectivityState(str, Enum):
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"


class Operation(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class BulkUploadResult:
    """Per-collection outcome of a bulk upload.

    Attributes:
        uploaded: Rows written per collection
        failed: Error message per collection whose upload failed
    """

    uploaded: dict[Collection, int] = field(default_factory=dict)
    failed: dict[Collection, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class SyncState:
    """Snapshot of the coordinator's status for display."""

    owner_id: str
    connectivity: ConnectivityState
    sync_status: SyncStatus
    last_sync_time: Optional[datetime]
    counts: dict[str, int]


def apply_mutation(
    data: AppData,
    collection: Collection,
    operation: Operation,
    record_id: str,
    payload: Any = None,
) -> AppData:
    """Return ``data`` with one add, update or delete applied.

    Args:
        data: Current dataset
        collection: Collection to change
        operation: ADD appends ``payload`` (a record); UPDATE merges ``payload``
            (a field mapping) into the record with ``record_id``; DELETE removes it
        record_id: Id of the record concerned
        payload: Record or field changes, depending on the operation

    An update or delete of an unknown id leaves the collection unchanged.
    """
    records = data.get(collection)
    if operation is Operation.ADD:
        return data.with_collection(collection, records + (payload,))
    if operation is Operation.UPDATE:
        changes = {k: v for k, v in payload.items() if k != "id"}
        return data.with_collection(
            collection,
            (replace(r, **changes) if r.id == record_id else r for r in records),
        )
    return data.with_collection(collection, (r for r in records if r.id != record_id))


class SyncCoordinator:
    """Owns in-memory state, the local cache and best-effort remote mirroring."""

    def __init__(
        self,
        owner_id: str,
        cache: LocalCache,
        remote: Optional[RemoteStore] = None,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the coordinator from the local cache.

        Args:
            owner_id: Owner key scoping every remote row
            cache: Local cache slot of this owner
            remote: Remote store, or None when no remote is configured
            probe_timeout: Seconds before a connectivity probe counts as offline
            clock: Source of the current time (for last_sync_time)
        """
        self.owner_id = owner_id
        self.cache = cache
        self.remote = remote
        self.probe_timeout = probe_timeout
        self._clock = clock or (lambda: datetime.now(UTC))
        self._cached = cache.read()
        self._data = self._cached
        self.connectivity = ConnectivityState.UNKNOWN
        self.sync_status = SyncStatus.IDLE
        self.last_sync_time: Optional[datetime] = None

    @property
    def data(self) -> AppData:
        """The authoritative in-memory dataset."""
        return self._data

    @property
    def cached_data(self) -> AppData:
        """The dataset as last written to the local cache."""
        return self._cached

    @property
    def is_online(self) -> bool:
        return self.connectivity is ConnectivityState.ONLINE

    def status(self) -> SyncState:
        """Return a status snapshot."""
        return SyncState(
            owner_id=self.owner_id,
            connectivity=self.connectivity,
            sync_status=self.sync_status,
            last_sync_time=self.last_sync_time,
            counts=self._data.counts(),
        )

    # Connectivity and reconciliation

    def probe_connectivity(self) -> bool:
        """Return True if a bounded read against the remote store succeeds.

        A missing remote store, any error and a timeout all count as offline.
        The caller decides what to do with the answer. The ping runs on a
        daemon thread, so a hung driver call never holds up process exit.
        """
        if self.remote is None:
            logger.debug("No remote store configured; offline")
            return False

        outcome: dict[str, BaseException] = {}

        def ping() -> None:
            try:
                self.remote.ping(self.owner_id)
            except Exception as exc:
                # Driver errors not wrapped by the store count as offline too.
                outcome["error"] = exc

        worker = threading.Thread(target=ping, name="milkledger-probe", daemon=True)
        worker.start()
        worker.join(timeout=self.probe_timeout)
        if worker.is_alive():
            logger.warning("Connectivity probe timed out after %.1fs", self.probe_timeout)
            return False
        if "error" in outcome:
            logger.warning("Connectivity probe failed: %s", outcome["error"])
            return False
        return True

    def load(self) -> None:
        """Load the dataset, from the remote store when reachable.

        Online: first-sync bulk upload if needed, then a full fetch that
        replaces memory and cache. Offline: memory falls back to the cache.
        """
        online = self.probe_connectivity()
        self.connectivity = ConnectivityState.ONLINE if online else ConnectivityState.OFFLINE

        if not online:
            logger.info("Offline: using local cache for %s", self.owner_id)
            self._data = self._cached
            return

        if self._is_first_sync():
            logger.info("First sync for %s: uploading local records", self.owner_id)
            self.bulk_upload()

        remote_data = AppData.empty()
        for collection in Collection:
            remote_data = remote_data.with_collection(collection, self._fetch_collection(collection))

        self._data = remote_data
        self._store_cache(remote_data)
        self.last_sync_time = self._clock()
        logger.info("Loaded remote data for %s: %s", self.owner_id, remote_data.counts())

    def bulk_upload(self) -> BulkUploadResult:
        """Upsert every non-empty cached collection, one request per collection.

        A failing collection is logged and recorded; the remaining collections
        are still attempted. Never raises.
        """
        uploaded: dict[Collection, int] = {}
        failed: dict[Collection, str] = {}
        for collection in Collection:
            records = self._cached.get(collection)
            if not records:
                continue
            if self.remote is None:
                failed[collection] = "no remote store configured"
                continue
            try:
                uploaded[collection] = self.remote.upsert(collection, self.owner_id, records)
            except RemoteStoreError as exc:
                logger.error("Bulk upload of %s failed: %s", collection.value, exc)
                failed[collection] = str(exc)
        return BulkUploadResult(uploaded=uploaded, failed=failed)

    def sync_data(self) -> SyncState:
        """Push local records, then reload from the remote store (remote wins).

        Status is ``syncing`` while running, ``error`` if the remote is
        unreachable at the end, ``idle`` otherwise.
        """
        self.sync_status = SyncStatus.SYNCING
        online = self.probe_connectivity()
        self.connectivity = ConnectivityState.ONLINE if online else ConnectivityState.OFFLINE
        if online:
            result = self.bulk_upload()
            if not result.ok:
                logger.warning("Sync uploaded with failures: %s", sorted(c.value for c in result.failed))
            self.load()
        self.sync_status = SyncStatus.IDLE if self.is_online else SyncStatus.ERROR
        return self.status()

    def close(self) -> None:
        """Tear the context down at logout. The cache stays on disk."""
        if self.remote is not None:
            self.remote.close()
        self.connectivity = ConnectivityState.UNKNOWN

    # Mutations

    def mutate(
        self,
        collection: Collection,
        operation: Operation,
        record_id: str,
        payload: Any = None,
    ) -> Optional[Record]:
        """Apply one change locally, then mirror it remotely if online.

        Args:
            collection: Collection to change
            operation: ADD, UPDATE or DELETE
            record_id: Id of the record concerned
            payload: New record for ADD, field mapping for UPDATE, unused for DELETE

        Returns:
            The stored record after ADD or UPDATE, None after DELETE or when
            the record does not exist
        """
        self._data = apply_mutation(self._data, collection, operation, record_id, payload)
        self._store_cache(apply_mutation(self._cached, collection, operation, record_id, payload))

        if self.is_online:
            self._mirror(collection, operation, record_id, payload)

        if operation is Operation.DELETE:
            return None
        return self._find(collection, record_id)

    def _add(self, collection: Collection, record: Record) -> Record:
        if not record.id:
            record = replace(record, id=new_id())
        return self.mutate(collection, Operation.ADD, record.id, record)

    def _update(self, collection: Collection, record_id: str, changes: dict[str, Any]) -> Optional[Record]:
        return self.mutate(collection, Operation.UPDATE, record_id, changes)

    def _delete(self, collection: Collection, record_id: str) -> None:
        self.mutate(collection, Operation.DELETE, record_id)

    def add_person(self, person: Person) -> Person:
        return self._add(Collection.PEOPLE, person)

    def update_person(self, person_id: str, **changes: Any) -> Optional[Person]:
        return self._update(Collection.PEOPLE, person_id, changes)

    def delete_person(self, person_id: str) -> None:
        self._delete(Collection.PEOPLE, person_id)

    def add_village_entry(self, entry: VillageEntry) -> VillageEntry:
        return self._add(Collection.VILLAGE_ENTRIES, entry)

    def update_village_entry(self, entry_id: str, **changes: Any) -> Optional[VillageEntry]:
        return self._update(Collection.VILLAGE_ENTRIES, entry_id, changes)

    def delete_village_entry(self, entry_id: str) -> None:
        self._delete(Collection.VILLAGE_ENTRIES, entry_id)

    def add_city_entry(self, entry: CityEntry) -> CityEntry:
        return self._add(Collection.CITY_ENTRIES, entry)

    def update_city_entry(self, entry_id: str, **changes: Any) -> Optional[CityEntry]:
        return self._update(Collection.CITY_ENTRIES, entry_id, changes)

    def delete_city_entry(self, entry_id: str) -> None:
        self._delete(Collection.CITY_ENTRIES, entry_id)

    def add_dairy_entry(self, entry: DairyEntry) -> DairyEntry:
        return self._add(Collection.DAIRY_ENTRIES, entry)

    def update_dairy_entry(self, entry_id: str, **changes: Any) -> Optional[DairyEntry]:
        return self._update(Collection.DAIRY_ENTRIES, entry_id, changes)

    def delete_dairy_entry(self, entry_id: str) -> None:
        self._delete(Collection.DAIRY_ENTRIES, entry_id)

    def add_payment(self, payment: Payment) -> Payment:
        return self._add(Collection.PAYMENTS, payment)

    def update_payment(self, payment_id: str, **changes: Any) -> Optional[Payment]:
        return self._update(Collection.PAYMENTS, payment_id, changes)

    def delete_payment(self, payment_id: str) -> None:
        self._delete(Collection.PAYMENTS, payment_id)

    # Internals

    def _find(self, collection: Collection, record_id: str) -> Optional[Record]:
        for record in self._data.get(collection):
            if record.id == record_id:
                return record
        return None

    def _is_first_sync(self) -> bool:
        """Remote holds no people for this owner while the cache has data."""
        if self._cached.is_empty():
            return False
        try:
            return not self.remote.has_people(self.owner_id)
        except RemoteStoreError as exc:
            logger.warning("First-sync check failed, skipping bulk upload: %s", exc)
            return False

    def _fetch_collection(self, collection: Collection) -> list[Record]:
        try:
            return self.remote.fetch_all(collection, self.owner_id)
        except RemoteStoreError as exc:
            logger.error("Fetching %s failed, treating it as empty: %s", collection.value, exc)
            return []

    def _store_cache(self, data: AppData) -> None:
        self._cached = data
        try:
            self.cache.write(data)
        except OSError as exc:
            logger.error("Writing local cache %s failed: %s", self.cache.path, exc)

    def _mirror(self, collection: Collection, operation: Operation, record_id: str, payload: Any) -> None:
        try:
            if operation is Operation.ADD:
                self.remote.insert(collection, self.owner_id, payload)
            elif operation is Operation.UPDATE:
                self.remote.update(collection, self.owner_id, record_id, payload)
            else:
                self.remote.delete(collection, self.owner_id, record_id)
        except RemoteStoreError as exc:
            logger.error(
                "Remote %s of %s/%s failed; kept locally until next sync: %s",
                operation.value,
                collection.value,
                record_id,
                exc,
            )
