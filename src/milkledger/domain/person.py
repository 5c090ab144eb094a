"""Person domain service."""

from typing import Optional

from milkledger.domain.entities import Category, Person, new_id
from milkledger.domain.errors import NotFoundError, ValidationError, person_not_found
from milkledger.domain.sync import SyncCoordinator


def parse_category(category: Category | str) -> Category:
    """Parse a business line name.

    Raises:
        ValidationError: If the name is not village, city or dairy
    """
    if isinstance(category, Category):
        return category
    try:
        return Category(category.strip().lower())
    except ValueError:
        choices = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category '{category}'. Choose one of: {choices}")


class PersonService:
    """Service for managing people."""

    def __init__(self, context: SyncCoordinator):
        """Initialize person service.

        Args:
            context: Sync coordinator of the signed-in owner
        """
        self.context = context

    def create_person(self, name: str, value: float, category: Category | str) -> Person:
        """Create a person.

        Args:
            name: Display name
            value: Rate used by the business line's calculator
            category: Business line (immutable once entries reference the person)

        Returns:
            The stored person with its generated id

        Raises:
            ValidationError: If the name is empty or the category unknown
        """
        name = name.strip()
        if not name:
            raise ValidationError("Person name cannot be empty")
        person = Person(id=new_id(), name=name, value=float(value), category=parse_category(category))
        return self.context.add_person(person)

    def get_person(self, person_id: str) -> Optional[Person]:
        """Get person by ID."""
        for person in self.context.data.people:
            if person.id == person_id:
                return person
        return None

    def require_person(self, person_id: str) -> Person:
        """Get person by ID, raising if missing.

        Raises:
            NotFoundError: If no person has this ID
        """
        person = self.get_person(person_id)
        if person is None:
            raise NotFoundError(person_not_found(person_id))
        return person

    def list_people(self, category: Optional[Category | str] = None) -> list[Person]:
        """List people sorted by name, optionally for one business line."""
        people = self.context.data.people
        if category is not None:
            wanted = parse_category(category)
            people = [p for p in people if p.category is wanted]
        return sorted(people, key=lambda p: (p.name.lower(), p.id))

    def update_person(
        self, person_id: str, name: Optional[str] = None, value: Optional[float] = None
    ) -> Person:
        """Rename a person and/or change their rate.

        Existing entries keep the name and rate they were saved with.

        Raises:
            NotFoundError: If the person does not exist
            ValidationError: If the new name is empty
        """
        self.require_person(person_id)
        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Person name cannot be empty")
            changes["name"] = name
        if value is not None:
            changes["value"] = float(value)
        if not changes:
            return self.require_person(person_id)
        return self.context.update_person(person_id, **changes)

    def delete_person(self, person_id: str) -> None:
        """Delete a person. Their entries and payments are left as they are.

        Raises:
            NotFoundError: If the person does not exist
        """
        self.require_person(person_id)
        self.context.delete_person(person_id)
