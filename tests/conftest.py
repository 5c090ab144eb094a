"""Shared pytest fixtures for milkledger tests."""

import time
from dataclasses import replace

import pytest
from sqlalchemy import text

from milkledger.database.base import RemoteStore, RemoteStoreError
from milkledger.database.local_cache import LocalCache
from milkledger.database.sqlalchemy_db import SQLAlchemyRemoteStore
from milkledger.domain.entities import Category, Collection, Person
from milkledger.domain.entry import EntryService
from milkledger.domain.export import ExportService
from milkledger.domain.payment import PaymentService
from milkledger.domain.person import PersonService
from milkledger.domain.report import ReportService
from milkledger.domain.sync import SyncCoordinator

OWNER = "owner-1"


class FakeRemoteStore(RemoteStore):
    """In-memory remote store with switches for simulating failures."""

    def __init__(self):
        self.rows: dict[tuple[str, Collection], dict[str, object]] = {}
        self.calls: list[tuple[str, str]] = []
        self.offline = False
        self.ping_delay = 0.0
        self.fail_writes = False
        self.fail_upsert = False
        self.fail_fetch: set[Collection] = set()
        self.closed = False

    def _table(self, collection, owner_id):
        return self.rows.setdefault((owner_id, collection), {})

    def seed(self, collection, owner_id, *records):
        for record in records:
            self._table(collection, owner_id)[record.id] = record

    def ping(self, owner_id):
        self.calls.append(("ping", ""))
        if self.ping_delay:
            time.sleep(self.ping_delay)
        if self.offline:
            raise RemoteStoreError("network unreachable")

    def has_people(self, owner_id):
        self.calls.append(("has_people", ""))
        return bool(self._table(Collection.PEOPLE, owner_id))

    def fetch_all(self, collection, owner_id):
        self.calls.append(("fetch_all", collection.value))
        if collection in self.fail_fetch:
            raise RemoteStoreError(f"select on {collection.value} failed")
        return list(self._table(collection, owner_id).values())

    def insert(self, collection, owner_id, record):
        self.calls.append(("insert", collection.value))
        if self.fail_writes:
            raise RemoteStoreError("insert rejected")
        self._table(collection, owner_id)[record.id] = record

    def upsert(self, collection, owner_id, records):
        self.calls.append(("upsert", collection.value))
        if self.fail_upsert:
            raise RemoteStoreError("upsert rejected")
        for record in records:
            self._table(collection, owner_id)[record.id] = record
        return len(records)

    def update(self, collection, owner_id, record_id, changes):
        self.calls.append(("update", collection.value))
        if self.fail_writes:
            raise RemoteStoreError("update rejected")
        table = self._table(collection, owner_id)
        if record_id in table:
            table[record_id] = replace(table[record_id], **{k: v for k, v in changes.items() if k != "id"})

    def delete(self, collection, owner_id, record_id):
        self.calls.append(("delete", collection.value))
        if self.fail_writes:
            raise RemoteStoreError("delete rejected")
        self._table(collection, owner_id).pop(record_id, None)

    def close(self):
        self.closed = True

    def called(self, name):
        return [target for call, target in self.calls if call == name]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MILKLEDGER_* settings of the developer machine out of tests."""
    for name in (
        "MILKLEDGER_USER",
        "MILKLEDGER_CACHE_DIR",
        "MILKLEDGER_CACHE_SLOT",
        "MILKLEDGER_REMOTE_URL",
        "MILKLEDGER_PROBE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cache_path(tmp_path):
    """Path of a cache slot file in a temporary directory."""
    return tmp_path / "cache" / f"m13-data-{OWNER}.json"


@pytest.fixture
def local_cache(cache_path):
    """Create an empty local cache slot."""
    return LocalCache(cache_path)


@pytest.fixture
def fake_remote():
    """Create an in-memory remote store."""
    return FakeRemoteStore()


@pytest.fixture
def remote_url(tmp_path):
    """SQLAlchemy URL of a temporary SQLite remote store."""
    return f"sqlite:///{tmp_path / 'remote.db'}"


@pytest.fixture
def remote_store(remote_url):
    """Create a SQLAlchemy remote store backed by a temporary SQLite file."""
    store = SQLAlchemyRemoteStore(remote_url)
    store.initialize_schema()
    yield store
    store.close()


@pytest.fixture
def insert_raw_person(remote_store):
    """Write a people row straight into the remote tables, bypassing the mappers."""

    def insert(owner_id, person_id, category):
        with remote_store.engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO people (id, user_id, name, value, category) "
                    "VALUES (:id, :user_id, 'Raw', 1.0, :category)"
                ),
                {"id": person_id, "user_id": owner_id, "category": category},
            )

    return insert


@pytest.fixture
def coordinator(local_cache):
    """Create an offline coordinator (no remote store configured)."""
    context = SyncCoordinator(OWNER, local_cache)
    context.load()
    return context


@pytest.fixture
def online_coordinator(local_cache, fake_remote):
    """Create a coordinator that is online against the fake remote store."""
    context = SyncCoordinator(OWNER, local_cache, fake_remote, probe_timeout=2.0)
    context.load()
    return context


@pytest.fixture
def person_service(coordinator):
    """Create a PersonService over the offline coordinator."""
    return PersonService(coordinator)


@pytest.fixture
def entry_service(coordinator):
    """Create an EntryService over the offline coordinator."""
    return EntryService(coordinator)


@pytest.fixture
def payment_service(coordinator):
    """Create a PaymentService over the offline coordinator."""
    return PaymentService(coordinator)


@pytest.fixture
def report_service(coordinator):
    """Create a ReportService over the offline coordinator."""
    return ReportService(coordinator)


@pytest.fixture
def export_service(coordinator):
    """Create an ExportService over the offline coordinator."""
    return ExportService(coordinator)


@pytest.fixture
def village_person(person_service) -> Person:
    """Create a village supplier with rate 50."""
    return person_service.create_person("Ramesh", 50, Category.VILLAGE)


@pytest.fixture
def city_person(person_service) -> Person:
    """Create a city customer with rate 15."""
    return person_service.create_person("Hotel Sagar", 15, Category.CITY)


@pytest.fixture
def dairy_person(person_service) -> Person:
    """Create a dairy cooperative account with rate 300."""
    return person_service.create_person("Co-op", 300, Category.DAIRY)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(tmp_path):
    """Global CLI options pointing at a temporary cache with no remote store."""
    return ["--user", "alice", "--cache-dir", str(tmp_path / "cli-cache")]

