"""CSV export command."""

import click
from milkledger.cli.context import get_context
from milkledger.cli.date_filters import resolve_cli_date_range
from milkledger.cli.error_handling import handle_domain_error
from milkledger.cli.person_resolution import resolve_person_or_exit
from milkledger.domain.errors import DomainError
from milkledger.domain.export import ExportService
from milkledger.domain.report import DAIRY_PERIODS


@click.command("export")
@click.argument("category", type=click.Choice(["village", "city", "dairy"], case_sensitive=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (defaults to <category>-data-<today>.csv)")
@click.option("--person", help="Only this person (name or ID)")
@click.option("--start-date", help="Start date (inclusive)")
@click.option("--end-date", help="End date (inclusive)")
@click.option("--this-month", is_flag=True, help="Entries of this month")
@click.option("--last-month", is_flag=True, help="Entries of last month")
@click.option("--period", type=click.Choice(list(DAIRY_PERIODS)), help="Ten-day period of the month")
@click.pass_context
def export(ctx, category, output, person, start_date, end_date, this_month, last_month, period):
    """Export the entries of a business line to CSV.

    Examples:
        milkledger export village
        milkledger export dairy --last-month --period 11-20 -o dairy.csv
    """
    exporter = ExportService(get_context(ctx))

    person_id = (
        resolve_person_or_exit(ctx, exporter.report_service.person_service, person, category) if person else None
    )
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"this-month": this_month, "last-month": last_month},
    )

    try:
        path, count = exporter.export_entries(
            category, output, person_id=person_id, start_date=start, end_date=end, period=period
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {count} {category} entr{'y' if count == 1 else 'ies'} to {path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export)
