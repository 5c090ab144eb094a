"""Domain model entities for milkledger.

These are pure data classes representing business concepts, independent of
both the remote table layout and the local cache document format. Records are
immutable; an edit produces a new record with ``dataclasses.replace``.
"""

import uuid
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Union


class Category(str, Enum):
    """Business line a person (and their entries and payments) belongs to."""

    VILLAGE = "village"
    CITY = "city"
    DAIRY = "dairy"


class Session(str, Enum):
    """Collection session of a dairy entry."""

    MORNING = "morning"
    EVENING = "evening"


class PaymentType(str, Enum):
    """Direction of a payment."""

    GIVEN = "given"
    RECEIVED = "received"


class Collection(str, Enum):
    """The five record collections.

    Each value is both the ``AppData`` attribute name and the remote table name.
    """

    PEOPLE = "people"
    VILLAGE_ENTRIES = "village_entries"
    CITY_ENTRIES = "city_entries"
    DAIRY_ENTRIES = "dairy_entries"
    PAYMENTS = "payments"


def new_id() -> str:
    """Generate a client-side record identifier."""
    return uuid.uuid4().hex


def payment_type_for(category: Category) -> PaymentType:
    """Village payments are given out; city and dairy payments are received."""
    if category is Category.VILLAGE:
        return PaymentType.GIVEN
    return PaymentType.RECEIVED


@dataclass(frozen=True)
class Person:
    """A supplier or customer with a per-person rate."""

    id: str
    name: str
    value: float
    category: Category


@dataclass(frozen=True)
class VillageEntry:
    """Daily village collection with morning and evening readings."""

    id: str
    person_id: str
    person_name: str
    date: date
    m_milk: float
    m_fat: float
    e_milk: float
    e_fat: float
    m_fat_kg: float
    e_fat_kg: float
    rate: float
    amount: float


@dataclass(frozen=True)
class CityEntry:
    """Daily city delivery quantity."""

    id: str
    person_id: str
    person_name: str
    date: date
    value: float
    rate: float
    amount: float


@dataclass(frozen=True)
class DairyEntry:
    """Dairy cooperative collection for one session of one day."""

    id: str
    person_id: str
    person_name: str
    date: date
    session: Session
    milk: float
    fat: float
    meter: float
    rate: float
    fat_kg: float
    meter_kg: float
    fat_amount: float
    meter_amount: float
    total_amount: float


@dataclass(frozen=True)
class Payment:
    """Money given to or received from a person."""

    id: str
    person_id: str
    person_name: str
    date: date
    amount: float
    comment: str
    type: PaymentType
    category: Category


Record = Union[Person, VillageEntry, CityEntry, DairyEntry, Payment]

COLLECTION_TYPES: dict[Collection, type] = {
    Collection.PEOPLE: Person,
    Collection.VILLAGE_ENTRIES: VillageEntry,
    Collection.CITY_ENTRIES: CityEntry,
    Collection.DAIRY_ENTRIES: DairyEntry,
    Collection.PAYMENTS: Payment,
}

ENTRY_COLLECTIONS: dict[Category, Collection] = {
    Category.VILLAGE: Collection.VILLAGE_ENTRIES,
    Category.CITY: Collection.CITY_ENTRIES,
    Category.DAIRY: Collection.DAIRY_ENTRIES,
}


def record_fields(record_type: type) -> list[str]:
    """Return the field names of an entity type in declaration order."""
    return [f.name for f in fields(record_type)]


def enum_value(value: Any) -> Any:
    """Return the plain value of an enum member, or the value unchanged."""
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class AppData:
    """Aggregate root holding every collection of one owner.

    This is the unit persisted to the local cache and reconciled against the
    remote store.
    """

    people: tuple[Person, ...] = ()
    village_entries: tuple[VillageEntry, ...] = ()
    city_entries: tuple[CityEntry, ...] = ()
    dairy_entries: tuple[DairyEntry, ...] = ()
    payments: tuple[Payment, ...] = ()

    @classmethod
    def empty(cls) -> "AppData":
        return cls()

    def get(self, collection: Collection) -> tuple:
        """Return the records of one collection."""
        return getattr(self, collection.value)

    def with_collection(self, collection: Collection, records) -> "AppData":
        """Return a copy with one collection replaced."""
        values = {c.value: self.get(c) for c in Collection}
        values[collection.value] = tuple(records)
        return AppData(**values)

    def is_empty(self) -> bool:
        return not any(self.get(c) for c in Collection)

    def counts(self) -> dict[str, int]:
        """Return the record count of each collection."""
        return {c.value: len(self.get(c)) for c in Collection}
