"""Sync and status commands."""

import click
from milkledger.cli.context import get_context


def _echo_state(state) -> None:
    click.echo(f"User:         {state.owner_id}")
    click.echo(f"Connectivity: {state.connectivity.value}")
    click.echo(f"Sync status:  {state.sync_status.value}")
    last = state.last_sync_time.isoformat(timespec="seconds") if state.last_sync_time else "never"
    click.echo(f"Last sync:    {last}")
    for collection, count in state.counts.items():
        click.echo(f"  {collection:<15} {count}")


@click.command("sync")
@click.pass_context
def sync(ctx):
    """Push local records to the remote store and reload from it.

    The remote copy wins. When the remote store cannot be reached the local
    data is kept and the sync status is reported as error.
    """
    coordinator = get_context(ctx)
    state = coordinator.sync_data()
    _echo_state(state)
    if not coordinator.is_online:
        click.echo("Warning: remote store unreachable; working from the local cache.", err=True)


@click.command("status")
@click.pass_context
def status(ctx):
    """Show connectivity, sync status and record counts."""
    _echo_state(get_context(ctx).status())


def register_commands(cli):
    """Register sync commands with main CLI."""
    cli.add_command(sync)
    cli.add_command(status)
