"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as an ambiguous person name."""


def person_not_found(person: str) -> str:
    """Return message for missing person by ID or name."""
    return f"Person '{person}' not found"


def entry_not_found(kind: str, entry_id: str) -> str:
    """Return message for a missing entry or payment."""
    return f"{kind.capitalize()} {entry_id} not found"


def wrong_category(person_name: str, actual: str, expected: str) -> str:
    """Return message when a person is used on the wrong business line."""
    return f"Person '{person_name}' belongs to {actual}, not {expected}"


def ambiguous_person(name: str, count: int) -> str:
    """Return message when a name matches more than one person."""
    return f"Name '{name}' matches {count} people; use the person ID instead"
