"""CLI helper for resolving person names to IDs."""

from __future__ import annotations

import click
from milkledger.domain.entities import Category
from milkledger.domain.errors import DomainError
from milkledger.domain.person import PersonService
from milkledger.utils.person_resolver import resolve_person


def resolve_person_or_exit(
    ctx: click.Context,
    person_service: PersonService,
    person: str,
    category: Category | str | None = None,
) -> str:
    """Resolve person name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_person(person_service, person, category)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
