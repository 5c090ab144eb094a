"""Per-person ledger command."""

import click
from milkledger.cli.context import get_context
from milkledger.cli.date_filters import resolve_cli_date_range
from milkledger.cli.error_handling import handle_domain_error
from milkledger.cli.person_resolution import resolve_person_or_exit
from milkledger.domain.errors import DomainError
from milkledger.domain.export import ExportService
from milkledger.utils.date_parser import get_date_range


@click.command("ledger")
@click.argument("category", type=click.Choice(["village", "city", "dairy"], case_sensitive=False))
@click.option("--start-date", help="Start date (defaults to the first of this month)")
@click.option("--end-date", help="End date (defaults to the end of this month)")
@click.option("--this-month", is_flag=True, help="Ledger of this month")
@click.option("--last-month", is_flag=True, help="Ledger of last month")
@click.option("--person", help="Only this person (name or ID)")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Also write the ledger to a CSV file")
@click.pass_context
def ledger(ctx, category, start_date, end_date, this_month, last_month, person, export_path):
    """Show per-person ledgers with running balances.

    Every person of the business line is listed, even without activity in
    the range. Payments are subtracted from earnings.

    Examples:
        milkledger ledger village
        milkledger ledger dairy --last-month --person "Co-op"
        milkledger ledger city --start-date 2024-01-01 --end-date 2024-01-31 --export city.csv
    """
    exporter = ExportService(get_context(ctx))
    report = exporter.report_service

    person_id = resolve_person_or_exit(ctx, report.person_service, person, category) if person else None
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"this-month": this_month, "last-month": last_month},
        default_range=get_date_range("this-month"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required for a custom range.", err=True)
        ctx.exit(1)

    try:
        ledgers = report.ledger(category, start, end, person_id=person_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not ledgers:
        click.echo("No people found.")
        return

    click.echo(f"\n{category.capitalize()} ledger {start} to {end}")
    for person_ledger in ledgers:
        click.echo("=" * 90)
        click.echo(
            f"{person_ledger.person_name}  Earnings: ₹{person_ledger.total_earnings:,.2f}  "
            f"Payments: ₹{person_ledger.total_payments:,.2f}  Net: ₹{person_ledger.net_amount:,.2f}"
        )
        if not person_ledger.lines:
            click.echo("  No activity.")
            continue
        for line in person_ledger.lines:
            click.echo(
                f"  {str(line.date):<12} {line.kind:<8} ₹{line.amount:>11,.2f}  "
                f"₹{line.balance:>11,.2f}  {line.description}"
            )

    if export_path:
        path, count = exporter.export_ledger(category, start, end, export_path, person_id=person_id)
        click.echo(f"\nExported {count} ledger line(s) to {path}")


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(ledger)
