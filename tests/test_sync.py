"""Tests for the sync coordinator."""

import subprocess
import sys
import time
from datetime import date, datetime, UTC

from milkledger.database.local_cache import LocalCache
from milkledger.domain.entities import (
    AppData,
    Category,
    CityEntry,
    Collection,
    Payment,
    PaymentType,
    Person,
)
from milkledger.domain.sync import (
    ConnectivityState,
    SyncCoordinator,
    SyncStatus,
)

OWNER = "owner-1"


def _person(person_id, name="Ramesh", value=50.0):
    return Person(id=person_id, name=name, value=value, category=Category.VILLAGE)


def _payment():
    return Payment(
        id="pay1",
        person_id="p1",
        person_name="Ramesh",
        date=date(2024, 1, 15),
        amount=500.0,
        comment="advance",
        type=PaymentType.GIVEN,
        category=Category.VILLAGE,
    )


def _seed_cache(cache: LocalCache, *people: Person) -> None:
    cache.write(AppData(people=people))


class TestConnectivity:
    """Tests for the connectivity probe."""

    def test_no_remote_is_offline(self, coordinator):
        assert coordinator.probe_connectivity() is False
        assert coordinator.connectivity is ConnectivityState.OFFLINE

    def test_reachable_remote_is_online(self, online_coordinator):
        assert online_coordinator.probe_connectivity() is True
        assert online_coordinator.is_online

    def test_probe_failure_is_offline(self, local_cache, fake_remote):
        fake_remote.offline = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        assert context.probe_connectivity() is False

    def test_probe_timeout_is_offline(self, local_cache, fake_remote):
        fake_remote.ping_delay = 0.5
        context = SyncCoordinator(OWNER, local_cache, fake_remote, probe_timeout=0.05)
        assert context.probe_connectivity() is False

    def test_unexpected_error_is_offline(self, local_cache, fake_remote, monkeypatch):
        def broken_ping(owner_id):
            raise RuntimeError("driver exploded")

        monkeypatch.setattr(fake_remote, "ping", broken_ping)
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()
        assert context.connectivity is ConnectivityState.OFFLINE


class TestLoad:
    """Tests for loading data."""

    def test_offline_load_uses_cache(self, local_cache, fake_remote):
        _seed_cache(local_cache, _person("p1"), _person("p2", "Suresh"))
        fake_remote.offline = True
        fake_remote.seed(Collection.PEOPLE, OWNER, _person("remote-only"))

        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        assert context.data == local_cache.read()
        assert fake_remote.called("fetch_all") == []
        assert context.last_sync_time is None

    def test_online_load_replaces_local_with_remote(self, local_cache, fake_remote):
        _seed_cache(local_cache, _person("local-only"))
        fake_remote.seed(Collection.PEOPLE, OWNER, _person("r1"))

        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        assert [p.id for p in context.data.people] == ["r1"]
        assert [p.id for p in local_cache.read().people] == ["r1"]
        assert fake_remote.called("upsert") == []

    def test_first_sync_uploads_cache_before_fetch(self, local_cache, fake_remote):
        """Remote has no people while the cache has three: bulk upload runs first."""
        _seed_cache(local_cache, _person("p1"), _person("p2", "Suresh"), _person("p3", "Mahesh"))

        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        calls = [call for call, _ in fake_remote.calls]
        assert ("upsert", "people") in fake_remote.calls
        assert calls.index("upsert") < calls.index("fetch_all")
        assert sorted(p.id for p in context.data.people) == ["p1", "p2", "p3"]

    def test_empty_cache_skips_first_sync(self, online_coordinator, fake_remote):
        assert fake_remote.called("upsert") == []
        assert fake_remote.called("has_people") == []

    def test_partial_fetch_failure_gives_empty_collection(self, local_cache, fake_remote):
        fake_remote.seed(Collection.PEOPLE, OWNER, _person("r1"))
        fake_remote.fail_fetch = {Collection.PAYMENTS}

        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        assert [p.id for p in context.data.people] == ["r1"]
        assert context.data.payments == ()
        assert fake_remote.called("fetch_all") == [c.value for c in Collection]

    def test_load_records_sync_time(self, local_cache, fake_remote):
        moment = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
        context = SyncCoordinator(OWNER, local_cache, fake_remote, clock=lambda: moment)
        context.load()
        assert context.last_sync_time == moment
        assert context.status().last_sync_time == moment


class TestMutations:
    """Tests for local-first mutations."""

    def test_offline_add_is_local_only(self, local_cache, fake_remote):
        fake_remote.offline = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        person = context.add_person(_person("p1"))

        assert person == _person("p1")
        assert context.data.people == (_person("p1"),)
        assert local_cache.read().people == (_person("p1"),)
        assert fake_remote.called("insert") == []
        assert context.sync_status is SyncStatus.IDLE

    def test_online_add_is_mirrored(self, online_coordinator, fake_remote, local_cache):
        online_coordinator.add_person(_person("p1"))

        assert local_cache.read().people == (_person("p1"),)
        assert fake_remote.called("insert") == ["people"]
        assert fake_remote.fetch_all(Collection.PEOPLE, OWNER) == [_person("p1")]

    def test_add_assigns_missing_id(self, coordinator):
        person = coordinator.add_person(_person(""))
        assert person.id
        assert coordinator.data.people[0].id == person.id

    def test_update_and_delete_are_durable(self, online_coordinator, local_cache):
        online_coordinator.add_person(_person("p1"))

        updated = online_coordinator.update_person("p1", value=60.0)
        assert updated.value == 60.0
        assert local_cache.read().people[0].value == 60.0

        online_coordinator.delete_person("p1")
        assert online_coordinator.data.people == ()
        assert local_cache.read().people == ()

    def test_update_unknown_id_returns_none(self, coordinator):
        assert coordinator.update_person("missing", name="X") is None

    def test_remote_write_failure_keeps_local_change(self, online_coordinator, fake_remote, local_cache):
        fake_remote.fail_writes = True

        online_coordinator.add_person(_person("p1"))
        online_coordinator.update_person("p1", name="Ramesh Patil")

        assert online_coordinator.data.people[0].name == "Ramesh Patil"
        assert local_cache.read().people[0].name == "Ramesh Patil"
        assert fake_remote.fetch_all(Collection.PEOPLE, OWNER) == []

    def test_cache_survives_new_coordinator(self, coordinator, local_cache):
        coordinator.add_person(_person("p1"))

        reopened = SyncCoordinator(OWNER, local_cache)
        reopened.load()
        assert reopened.data.people == (_person("p1"),)

    def test_each_entity_method_targets_its_collection(self, coordinator):
        entry = CityEntry(
            id="c1",
            person_id="p2",
            person_name="Hotel Sagar",
            date=date(2024, 1, 15),
            value=20.0,
            rate=15.0,
            amount=300.0,
        )
        coordinator.add_city_entry(entry)
        assert coordinator.data.city_entries == (entry,)
        assert coordinator.data.people == ()

        coordinator.update_city_entry("c1", value=10.0, amount=150.0)
        assert coordinator.data.city_entries[0].amount == 150.0

        coordinator.delete_city_entry("c1")
        assert coordinator.data.city_entries == ()


class TestBulkUploadAndSync:
    """Tests for bulk upload and explicit sync."""

    def test_bulk_upload_reports_per_collection(self, local_cache, fake_remote):
        _seed_cache(local_cache, _person("p1"), _person("p2", "Suresh"))
        fake_remote.offline = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()

        result = context.bulk_upload()
        assert result.ok
        assert result.uploaded == {Collection.PEOPLE: 2}

    def test_bulk_upload_never_raises(self, local_cache, fake_remote):
        _seed_cache(local_cache, _person("p1"))
        fake_remote.fail_upsert = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)

        result = context.bulk_upload()
        assert not result.ok
        assert Collection.PEOPLE in result.failed

    def test_bulk_upload_without_remote(self, local_cache):
        _seed_cache(local_cache, _person("p1"))
        result = SyncCoordinator(OWNER, local_cache).bulk_upload()
        assert result.failed == {Collection.PEOPLE: "no remote store configured"}

    def test_sync_pushes_offline_changes(self, local_cache, fake_remote):
        fake_remote.seed(Collection.PEOPLE, OWNER, _person("r1"))
        fake_remote.offline = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()
        context.add_person(_person("local"))

        fake_remote.offline = False
        state = context.sync_data()

        assert state.sync_status is SyncStatus.IDLE
        assert state.connectivity is ConnectivityState.ONLINE
        assert sorted(p.id for p in context.data.people) == ["local", "r1"]

    def test_remote_wins_when_upload_fails(self, local_cache, fake_remote):
        fake_remote.seed(Collection.PEOPLE, OWNER, _person("r1", "Remote"))
        fake_remote.offline = True
        context = SyncCoordinator(OWNER, local_cache, fake_remote)
        context.load()
        context.add_person(_person("local", "Unsynced"))

        fake_remote.offline = False
        fake_remote.fail_upsert = True
        context.sync_data()

        assert context.data.people == (_person("r1", "Remote"),)
        assert local_cache.read().people == (_person("r1", "Remote"),)

    def test_sync_while_offline_reports_error(self, coordinator):
        coordinator.add_person(_person("p1"))

        state = coordinator.sync_data()

        assert state.sync_status is SyncStatus.ERROR
        assert state.connectivity is ConnectivityState.OFFLINE
        assert coordinator.data.people == (_person("p1"),)

    def test_status_counts(self, coordinator):
        coordinator.add_person(_person("p1"))
        assert coordinator.status().counts["people"] == 1

    def test_close_releases_remote(self, online_coordinator, fake_remote):
        online_coordinator.close()
        assert fake_remote.closed
        assert online_coordinator.connectivity is ConnectivityState.UNKNOWN


def test_unmappable_remote_row_gives_empty_collection(local_cache, remote_store, insert_raw_person):
    insert_raw_person(OWNER, "bad", "Village")
    remote_store.insert(Collection.PAYMENTS, OWNER, _payment())

    context = SyncCoordinator(OWNER, local_cache, remote_store)
    context.load()

    assert context.is_online
    assert context.data.people == ()
    assert context.data.payments == (_payment(),)
    assert local_cache.read().people == ()


def test_against_sqlalchemy_store(local_cache, remote_store):
    """Offline edits reach a real store on the next sync."""
    context = SyncCoordinator(OWNER, local_cache, remote_store)
    context.load()
    assert context.is_online

    context.add_person(_person("p1"))
    context.update_person("p1", value=65.0)

    fresh = SyncCoordinator(OWNER, LocalCache(local_cache.path.with_name("other.json")), remote_store)
    fresh.load()
    assert fresh.data.people == (_person("p1", value=65.0),)


HUNG_PING_SCRIPT = """
import sys
import time

from milkledger.database.base import RemoteStore
from milkledger.database.local_cache import LocalCache
from milkledger.domain.sync import SyncCoordinator


class HungRemote(RemoteStore):
    def ping(self, owner_id):
        time.sleep(60)

    def has_people(self, owner_id):
        return False

    def fetch_all(self, collection, owner_id):
        return []

    def insert(self, collection, owner_id, record):
        pass

    def upsert(self, collection, owner_id, records):
        return 0

    def update(self, collection, owner_id, record_id, changes):
        pass

    def delete(self, collection, owner_id, record_id):
        pass

    def close(self):
        pass


context = SyncCoordinator("owner-1", LocalCache(sys.argv[1]), HungRemote(), probe_timeout=0.2)
print(context.probe_connectivity())
"""


def test_hung_probe_does_not_hold_process_exit(tmp_path):
    started = time.monotonic()
    result = subprocess.run(
        [sys.executable, "-c", HUNG_PING_SCRIPT, str(tmp_path / "slot.json")],
        capture_output=True,
        text=True,
        timeout=30,
    )
    elapsed = time.monotonic() - started

    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "False"
    assert elapsed < 15
