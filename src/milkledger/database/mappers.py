"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the remote table layout can
change without touching the sync coordinator or the services.
"""

from typing import Any

from milkledger.domain import entities as domain
from milkledger.database.models import (
    Person as ORMPerson,
    VillageEntry as ORMVillageEntry,
    CityEntry as ORMCityEntry,
    DairyEntry as ORMDairyEntry,
    Payment as ORMPayment,
)

ORM_MODELS = {
    domain.Collection.PEOPLE: ORMPerson,
    domain.Collection.VILLAGE_ENTRIES: ORMVillageEntry,
    domain.Collection.CITY_ENTRIES: ORMCityEntry,
    domain.Collection.DAIRY_ENTRIES: ORMDairyEntry,
    domain.Collection.PAYMENTS: ORMPayment,
}


def person_to_domain(orm_person: ORMPerson) -> domain.Person:
    """Convert SQLAlchemy Person model to domain Person entity."""
    return domain.Person(
        id=orm_person.id,
        name=orm_person.name,
        value=orm_person.value,
        category=domain.Category(orm_person.category),
    )


def village_entry_to_domain(orm_entry: ORMVillageEntry) -> domain.VillageEntry:
    """Convert SQLAlchemy VillageEntry model to domain VillageEntry entity."""
    return domain.VillageEntry(
        id=orm_entry.id,
        person_id=orm_entry.person_id,
        person_name=orm_entry.person_name,
        date=orm_entry.date,
        m_milk=orm_entry.m_milk,
        m_fat=orm_entry.m_fat,
        e_milk=orm_entry.e_milk,
        e_fat=orm_entry.e_fat,
        m_fat_kg=orm_entry.m_fat_kg,
        e_fat_kg=orm_entry.e_fat_kg,
        rate=orm_entry.rate,
        amount=orm_entry.amount,
    )


def city_entry_to_domain(orm_entry: ORMCityEntry) -> domain.CityEntry:
    """Convert SQLAlchemy CityEntry model to domain CityEntry entity."""
    return domain.CityEntry(
        id=orm_entry.id,
        person_id=orm_entry.person_id,
        person_name=orm_entry.person_name,
        date=orm_entry.date,
        value=orm_entry.value,
        rate=orm_entry.rate,
        amount=orm_entry.amount,
    )


def dairy_entry_to_domain(orm_entry: ORMDairyEntry) -> domain.DairyEntry:
    """Convert SQLAlchemy DairyEntry model to domain DairyEntry entity."""
    return domain.DairyEntry(
        id=orm_entry.id,
        person_id=orm_entry.person_id,
        person_name=orm_entry.person_name,
        date=orm_entry.date,
        session=domain.Session(orm_entry.session),
        milk=orm_entry.milk,
        fat=orm_entry.fat,
        meter=orm_entry.meter,
        rate=orm_entry.rate,
        fat_kg=orm_entry.fat_kg,
        meter_kg=orm_entry.meter_kg,
        fat_amount=orm_entry.fat_amount,
        meter_amount=orm_entry.meter_amount,
        total_amount=orm_entry.total_amount,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        person_id=orm_payment.person_id,
        person_name=orm_payment.person_name,
        date=orm_payment.date,
        amount=orm_payment.amount,
        comment=orm_payment.comment or "",
        type=domain.PaymentType(orm_payment.type),
        category=domain.Category(orm_payment.category),
    )


TO_DOMAIN = {
    domain.Collection.PEOPLE: person_to_domain,
    domain.Collection.VILLAGE_ENTRIES: village_entry_to_domain,
    domain.Collection.CITY_ENTRIES: city_entry_to_domain,
    domain.Collection.DAIRY_ENTRIES: dairy_entry_to_domain,
    domain.Collection.PAYMENTS: payment_to_domain,
}


def to_domain(collection: domain.Collection, orm_row) -> domain.Record:
    """Convert any ORM row of a collection to its domain entity."""
    return TO_DOMAIN[collection](orm_row)


def changes_to_columns(changes: dict[str, Any]) -> dict[str, Any]:
    """Convert a domain field-change mapping to column values.

    The id is never rewritten; enum members become their stored strings.
    """
    return {key: domain.enum_value(value) for key, value in changes.items() if key != "id"}


def to_orm(collection: domain.Collection, record: domain.Record, owner_id: str):
    """Build an ORM row for a domain record owned by ``owner_id``."""
    model = ORM_MODELS[collection]
    columns = {
        name: domain.enum_value(getattr(record, name))
        for name in domain.record_fields(type(record))
    }
    return model(user_id=owner_id, **columns)
