"""Entry commands for the village, city and dairy business lines."""

import click
from milkledger.cli.context import get_context
from milkledger.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from milkledger.cli.error_handling import handle_domain_error
from milkledger.cli.person_resolution import resolve_person_or_exit
from milkledger.domain.entities import Category
from milkledger.domain.entry import EntryService
from milkledger.domain.errors import DomainError
from milkledger.domain.report import DAIRY_PERIODS, ReportService, entry_amount
from milkledger.utils.number_parser import format_number

DATE_HELP = "Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')"


def _echo_saved(entry, created: bool, amount: float) -> None:
    action = "Created" if created else "Updated"
    click.echo(f"{action} entry for {entry.person_name} on {entry.date} (ID: {entry.id})")
    click.echo(f"Amount: ₹{amount:,.2f}")


def _list_entries(ctx, category: Category, person, start_date, end_date, this_month, last_month, period=None):
    context = get_context(ctx)
    report = ReportService(context)

    person_id = None
    if person:
        person_id = resolve_person_or_exit(ctx, report.person_service, person, category)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"this-month": this_month, "last-month": last_month},
    )

    try:
        entries = report.filter_entries(category, person_id=person_id, start_date=start, end_date=end, period=period)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} {category.value} entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 100)
    for entry in entries:
        if category is Category.VILLAGE:
            detail = (
                f"M {format_number(entry.m_milk)} @ {format_number(entry.m_fat)}  "
                f"E {format_number(entry.e_milk)} @ {format_number(entry.e_fat)}"
            )
        elif category is Category.CITY:
            detail = f"Value {format_number(entry.value)}"
        else:
            detail = (
                f"{entry.session.value:7s} Milk {format_number(entry.milk)} "
                f"Fat {format_number(entry.fat)} Meter {format_number(entry.meter)}"
            )
        click.echo(
            f"{str(entry.date):<12} {entry.person_name[:20]:<20} {detail:<40} "
            f"₹{entry_amount(entry):>12,.2f}  {entry.id}"
        )

    totals = report.totals(entries)
    click.echo("-" * 100)
    click.echo(f"Total entries: {totals.total_entries}   Total amount: ₹{totals.total_amount:,.2f}")


def _delete_entry(ctx, category: Category, entry_id: str) -> None:
    service = EntryService(get_context(ctx))
    try:
        service.delete_entry(category, entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {category.value} entry {entry_id}")


def _list_options(func):
    func = click.option("--last-month", is_flag=True, help="Entries of last month")(func)
    func = click.option("--this-month", is_flag=True, help="Entries of this month")(func)
    func = click.option("--end-date", help="End date (inclusive)")(func)
    func = click.option("--start-date", help="Start date (inclusive)")(func)
    func = click.option("--person", help="Person name or ID")(func)
    return func


# Village


@click.group()
def village_group():
    """Village entries (morning/evening milk and fat)."""
    pass


@village_group.command("save")
@click.argument("person", metavar="PERSON")
@click.option("--date", "entry_date", default="today", show_default=True, help=DATE_HELP)
@click.option("--m-milk", default="", help="Morning milk")
@click.option("--m-fat", default="", help="Morning fat")
@click.option("--e-milk", default="", help="Evening milk")
@click.option("--e-fat", default="", help="Evening fat")
@click.pass_context
def save_village(ctx, person: str, entry_date: str, m_milk: str, m_fat: str, e_milk: str, e_fat: str):
    """Save the village entry of a person for a day.

    Saving again for the same person and day edits the existing entry.
    Empty readings count as zero.

    Examples:
        milkledger village save "Ramesh" --date 2024-01-15 --m-milk 10 --m-fat 4 --e-milk 8 --e-fat 3.5
    """
    service = EntryService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service.person_service, person, Category.VILLAGE)
    day = parse_date_or_exit(ctx, entry_date)

    try:
        entry, created = service.save_village_entry(person_id, day, m_milk, m_fat, e_milk, e_fat)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_saved(entry, created, entry.amount)
    click.echo(f"M/FatKg: {format_number(entry.m_fat_kg)}  E/FatKg: {format_number(entry.e_fat_kg)}")


@village_group.command("list")
@_list_options
@click.pass_context
def list_village(ctx, person, start_date, end_date, this_month, last_month):
    """List village entries with totals."""
    _list_entries(ctx, Category.VILLAGE, person, start_date, end_date, this_month, last_month)


@village_group.command("delete")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.pass_context
def delete_village(ctx, entry_id: str):
    """Delete a village entry."""
    _delete_entry(ctx, Category.VILLAGE, entry_id)


# City


@click.group()
def city_group():
    """City entries (quantity times rate)."""
    pass


@city_group.command("save")
@click.argument("person", metavar="PERSON")
@click.option("--date", "entry_date", default="today", show_default=True, help=DATE_HELP)
@click.option("--value", required=True, help="Quantity delivered")
@click.pass_context
def save_city(ctx, person: str, entry_date: str, value: str):
    """Save the city entry of a person for a day.

    Examples:
        milkledger city save "Hotel Sagar" --date 2024-01-15 --value 20
    """
    service = EntryService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service.person_service, person, Category.CITY)
    day = parse_date_or_exit(ctx, entry_date)

    try:
        entry, created = service.save_city_entry(person_id, day, value)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_saved(entry, created, entry.amount)


@city_group.command("list")
@_list_options
@click.pass_context
def list_city(ctx, person, start_date, end_date, this_month, last_month):
    """List city entries with totals."""
    _list_entries(ctx, Category.CITY, person, start_date, end_date, this_month, last_month)


@city_group.command("delete")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.pass_context
def delete_city(ctx, entry_id: str):
    """Delete a city entry."""
    _delete_entry(ctx, Category.CITY, entry_id)


# Dairy


@click.group()
def dairy_group():
    """Dairy cooperative entries (milk, fat and meter per session)."""
    pass


@dairy_group.command("save")
@click.argument("person", metavar="PERSON")
@click.option("--date", "entry_date", default="today", show_default=True, help=DATE_HELP)
@click.option(
    "--session",
    type=click.Choice(["morning", "evening"], case_sensitive=False),
    default="morning",
    show_default=True,
)
@click.option("--milk", default="", help="Milk volume")
@click.option("--fat", default="", help="Fat percentage")
@click.option("--meter", default="", help="Meter reading")
@click.pass_context
def save_dairy(ctx, person: str, entry_date: str, session: str, milk: str, fat: str, meter: str):
    """Save the dairy entry of a person for one session of a day.

    Examples:
        milkledger dairy save "Co-op" --date 2024-01-15 --session evening --milk 100 --fat 4 --meter 30
    """
    service = EntryService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service.person_service, person, Category.DAIRY)
    day = parse_date_or_exit(ctx, entry_date)

    try:
        entry, created = service.save_dairy_entry(person_id, day, session, milk, fat, meter)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_saved(entry, created, entry.total_amount)
    click.echo(
        f"FatKg: {entry.fat_kg:.2f}  MeterKg: {entry.meter_kg:.2f}  "
        f"Fat amount: ₹{entry.fat_amount:,.2f}  Meter amount: ₹{entry.meter_amount:,.2f}"
    )


@dairy_group.command("list")
@_list_options
@click.option("--period", type=click.Choice(list(DAIRY_PERIODS)), help="Ten-day period of the month")
@click.pass_context
def list_dairy(ctx, person, start_date, end_date, this_month, last_month, period):
    """List dairy entries with totals."""
    _list_entries(ctx, Category.DAIRY, person, start_date, end_date, this_month, last_month, period)


@dairy_group.command("delete")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.pass_context
def delete_dairy(ctx, entry_id: str):
    """Delete a dairy entry."""
    _delete_entry(ctx, Category.DAIRY, entry_id)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(village_group, name="village")
    cli.add_command(city_group, name="city")
    cli.add_command(dairy_group, name="dairy")
