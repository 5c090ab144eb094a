"""Entry domain service for the three business lines.

Saving an entry is keyed on its natural key: (person, date) for village and
city, (person, date, session) for dairy. Saving again for the same key edits
the existing entry instead of adding a second one.
"""

from datetime import date
from typing import Any, Optional

from milkledger.domain.entities import (
    Category,
    CityEntry,
    DairyEntry,
    ENTRY_COLLECTIONS,
    Person,
    Session,
    VillageEntry,
    new_id,
)
from milkledger.domain.errors import NotFoundError, ValidationError, entry_not_found, wrong_category
from milkledger.domain.person import PersonService, parse_category
from milkledger.domain.rates import calculate_city, calculate_dairy, calculate_village, coerce_number
from milkledger.domain.sync import SyncCoordinator

Entry = VillageEntry | CityEntry | DairyEntry


def parse_session(session: Session | str) -> Session:
    """Parse a dairy session name.

    Raises:
        ValidationError: If the name is not morning or evening
    """
    if isinstance(session, Session):
        return session
    try:
        return Session(session.strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown session '{session}'. Choose one of: morning, evening")


class EntryService:
    """Service for saving and removing collection entries."""

    def __init__(self, context: SyncCoordinator):
        """Initialize entry service.

        Args:
            context: Sync coordinator of the signed-in owner
        """
        self.context = context
        self.person_service = PersonService(context)

    def _require_person_in(self, person_id: str, category: Category) -> Person:
        person = self.person_service.require_person(person_id)
        if person.category is not category:
            raise ValidationError(wrong_category(person.name, person.category.value, category.value))
        return person

    # Village

    def find_village_entry(self, person_id: str, entry_date: date) -> Optional[VillageEntry]:
        """Find the village entry of a person on a day."""
        for entry in self.context.data.village_entries:
            if entry.person_id == person_id and entry.date == entry_date:
                return entry
        return None

    def save_village_entry(
        self,
        person_id: str,
        entry_date: date,
        m_milk: Any = None,
        m_fat: Any = None,
        e_milk: Any = None,
        e_fat: Any = None,
    ) -> tuple[VillageEntry, bool]:
        """Create or edit the village entry of a person on a day.

        Readings that are missing or not numeric count as zero. Derived
        fields use the person's current rate.

        Returns:
            Tuple of (stored entry, True if it was created)

        Raises:
            NotFoundError: If the person does not exist
            ValidationError: If the person is not a village person
        """
        person = self._require_person_in(person_id, Category.VILLAGE)
        readings = {
            "m_milk": coerce_number(m_milk),
            "m_fat": coerce_number(m_fat),
            "e_milk": coerce_number(e_milk),
            "e_fat": coerce_number(e_fat),
        }
        amounts = calculate_village(person.value, **readings)
        values = {
            "person_id": person.id,
            "person_name": person.name,
            "date": entry_date,
            **readings,
            "m_fat_kg": amounts.m_fat_kg,
            "e_fat_kg": amounts.e_fat_kg,
            "rate": person.value,
            "amount": amounts.amount,
        }

        existing = self.find_village_entry(person.id, entry_date)
        if existing is not None:
            return self.context.update_village_entry(existing.id, **values), False
        return self.context.add_village_entry(VillageEntry(id=new_id(), **values)), True

    # City

    def find_city_entry(self, person_id: str, entry_date: date) -> Optional[CityEntry]:
        """Find the city entry of a person on a day."""
        for entry in self.context.data.city_entries:
            if entry.person_id == person_id and entry.date == entry_date:
                return entry
        return None

    def save_city_entry(self, person_id: str, entry_date: date, value: Any = None) -> tuple[CityEntry, bool]:
        """Create or edit the city entry of a person on a day.

        Returns:
            Tuple of (stored entry, True if it was created)

        Raises:
            NotFoundError: If the person does not exist
            ValidationError: If the person is not a city person
        """
        person = self._require_person_in(person_id, Category.CITY)
        quantity = coerce_number(value)
        values = {
            "person_id": person.id,
            "person_name": person.name,
            "date": entry_date,
            "value": quantity,
            "rate": person.value,
            "amount": calculate_city(person.value, quantity).amount,
        }

        existing = self.find_city_entry(person.id, entry_date)
        if existing is not None:
            return self.context.update_city_entry(existing.id, **values), False
        return self.context.add_city_entry(CityEntry(id=new_id(), **values)), True

    # Dairy

    def find_dairy_entry(
        self, person_id: str, entry_date: date, session: Session | str
    ) -> Optional[DairyEntry]:
        """Find the dairy entry of a person for one session of a day."""
        session = parse_session(session)
        for entry in self.context.data.dairy_entries:
            if entry.person_id == person_id and entry.date == entry_date and entry.session is session:
                return entry
        return None

    def save_dairy_entry(
        self,
        person_id: str,
        entry_date: date,
        session: Session | str,
        milk: Any = None,
        fat: Any = None,
        meter: Any = None,
    ) -> tuple[DairyEntry, bool]:
        """Create or edit the dairy entry of a person for one session of a day.

        Returns:
            Tuple of (stored entry, True if it was created)

        Raises:
            NotFoundError: If the person does not exist
            ValidationError: If the person is not a dairy person or the session is unknown
        """
        session = parse_session(session)
        person = self._require_person_in(person_id, Category.DAIRY)
        readings = {
            "milk": coerce_number(milk),
            "fat": coerce_number(fat),
            "meter": coerce_number(meter),
        }
        amounts = calculate_dairy(person.value, **readings)
        values = {
            "person_id": person.id,
            "person_name": person.name,
            "date": entry_date,
            "session": session,
            **readings,
            "rate": person.value,
            "fat_kg": amounts.fat_kg,
            "meter_kg": amounts.meter_kg,
            "fat_amount": amounts.fat_amount,
            "meter_amount": amounts.meter_amount,
            "total_amount": amounts.total_amount,
        }

        existing = self.find_dairy_entry(person.id, entry_date, session)
        if existing is not None:
            return self.context.update_dairy_entry(existing.id, **values), False
        return self.context.add_dairy_entry(DairyEntry(id=new_id(), **values)), True

    # Any line

    def get_entry(self, category: Category | str, entry_id: str) -> Optional[Entry]:
        """Get an entry of a business line by ID."""
        collection = ENTRY_COLLECTIONS[parse_category(category)]
        for entry in self.context.data.get(collection):
            if entry.id == entry_id:
                return entry
        return None

    def delete_entry(self, category: Category | str, entry_id: str) -> None:
        """Delete an entry of a business line.

        Raises:
            NotFoundError: If the entry does not exist
        """
        category = parse_category(category)
        if self.get_entry(category, entry_id) is None:
            raise NotFoundError(entry_not_found(f"{category.value} entry", entry_id))

        if category is Category.VILLAGE:
            self.context.delete_village_entry(entry_id)
        elif category is Category.CITY:
            self.context.delete_city_entry(entry_id)
        else:
            self.context.delete_dairy_entry(entry_id)
