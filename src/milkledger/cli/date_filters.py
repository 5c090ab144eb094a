"""CLI helpers for date and date range resolution."""

from datetime import date

import click

from milkledger.utils.date_parser import get_date_range, parse_date


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-month) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        period = next(name for name, is_set in period_flags.items() if is_set)
        return get_date_range(period)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    if start is None and end is None and default_range is not None:
        return default_range

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date.", err=True)
        ctx.exit(1)

    return start, end
