"""Utility for resolving person names to IDs."""

from typing import Optional

from milkledger.domain.entities import Category
from milkledger.domain.errors import ConflictError, NotFoundError, ambiguous_person, person_not_found
from milkledger.domain.person import PersonService


def resolve_person(
    person_service: PersonService, person: str, category: Optional[Category | str] = None
) -> str:
    """Resolve person name or ID to person ID.

    Args:
        person_service: PersonService instance
        person: Person ID or name (case-insensitive)
        category: Optional business line to search in

    Returns:
        Person ID

    Raises:
        NotFoundError: If no person matches
        ConflictError: If the name matches more than one person
    """
    if person_service.get_person(person) is not None:
        return person

    wanted = person.strip().lower()
    matches = [p for p in person_service.list_people(category) if p.name.lower() == wanted]
    if not matches:
        raise NotFoundError(person_not_found(person))
    if len(matches) > 1:
        raise ConflictError(ambiguous_person(person, len(matches)))
    return matches[0].id
