"""Main CLI entry point."""

import click
from milkledger.config import Settings
from milkledger.utils.logging_setup import configure_logging

# Import and register all commands at module level
from milkledger.cli.commands import (
    person,
    entry,
    payment,
    ledger,
    export_cmd,
    sync,
)


@click.group()
@click.option(
    "--user",
    help="Owner key of the active user (overrides MILKLEDGER_USER environment variable)",
    envvar="MILKLEDGER_USER",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    help="Directory of the local cache (overrides MILKLEDGER_CACHE_DIR environment variable)",
    envvar="MILKLEDGER_CACHE_DIR",
)
@click.option(
    "--remote-url",
    help="SQLAlchemy URL of the remote store (overrides MILKLEDGER_REMOTE_URL environment variable)",
    envvar="MILKLEDGER_REMOTE_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, user: str | None, cache_dir: str | None, remote_url: str | None, verbose: bool):
    """Milkledger - Milk business bookkeeping.

    Record village, city and dairy milk entries and payments, keep
    per-person ledgers and export them to CSV. Works offline from a local
    cache and syncs with a remote store when it is reachable.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    # The session itself is opened lazily by the first command that needs data
    ctx.obj["settings"] = settings.with_overrides(user=user, cache_dir=cache_dir, remote_url=remote_url)


# Register all commands
person.register_commands(cli)
entry.register_commands(cli)
payment.register_commands(cli)
ledger.register_commands(cli)
export_cmd.register_commands(cli)
sync.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
