"""Person management commands."""

import click
from milkledger.cli.context import get_context
from milkledger.cli.error_handling import handle_domain_error
from milkledger.cli.person_resolution import resolve_person_or_exit
from milkledger.domain.errors import DomainError
from milkledger.domain.person import PersonService
from milkledger.utils.number_parser import format_number, parse_number

CATEGORY_CHOICE = click.Choice(["village", "city", "dairy"], case_sensitive=False)


@click.group()
def person_group():
    """Manage people and their rates."""
    pass


@person_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--rate", required=True, help="Rate used for this person's entries")
@click.option("--category", required=True, type=CATEGORY_CHOICE, help="Business line")
@click.pass_context
def add_person(ctx, name: str, rate: str, category: str):
    """Add a person.

    Examples:
        milkledger person add "Ramesh" --rate 50 --category village
        milkledger person add "Hotel Sagar" --rate 15 --category city
    """
    service = PersonService(get_context(ctx))

    try:
        value = parse_number(rate)
    except ValueError as e:
        click.echo(f"Error: Invalid rate: {e}", err=True)
        ctx.exit(1)

    try:
        person = service.create_person(name=name, value=value, category=category)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created person '{person.name}' (ID: {person.id})")


@person_group.command("list")
@click.option("--category", type=CATEGORY_CHOICE, help="Only people of this business line")
@click.pass_context
def list_people(ctx, category: str | None):
    """List people."""
    service = PersonService(get_context(ctx))

    people = service.list_people(category)
    if not people:
        click.echo("No people found.")
        return

    click.echo("\nPeople:")
    click.echo("-" * 80)
    for person in people:
        click.echo(
            f"{person.id:32s} | {person.name:20s} | {person.category.value:7s} | Rate: {format_number(person.value)}"
        )


@person_group.command("edit")
@click.argument("person", metavar="PERSON")
@click.option("--name", help="New name")
@click.option("--rate", help="New rate (applies to entries saved from now on)")
@click.pass_context
def edit_person(ctx, person: str, name: str | None, rate: str | None) -> None:
    """Rename a person or change their rate.

    PERSON can be a person name or ID.

    Examples:
        milkledger person edit "Ramesh" --rate 52
        milkledger person edit 3f2a... --name "Ramesh Patil"
    """
    service = PersonService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service, person)

    value = None
    if rate is not None:
        try:
            value = parse_number(rate)
        except ValueError as e:
            click.echo(f"Error: Invalid rate: {e}", err=True)
            ctx.exit(1)

    if name is None and value is None:
        click.echo("Nothing to change. Use --name and/or --rate.")
        return

    try:
        updated = service.update_person(person_id, name=name, value=value)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated person '{updated.name}' (rate {format_number(updated.value)})")


@person_group.command("delete")
@click.argument("person", metavar="PERSON")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_person(ctx, person: str, yes: bool) -> None:
    """Delete a person.

    PERSON can be a person name or ID. Entries and payments of the person
    are kept.
    """
    service = PersonService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service, person)
    person_obj = service.require_person(person_id)

    if not yes and not click.confirm(f"Are you sure you want to delete '{person_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_person(person_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted person '{person_obj.name}'")


def register_commands(cli):
    """Register person commands with main CLI."""
    cli.add_command(person_group, name="person")
