"""CLI helpers for opening the data context of the active user."""

import click

from milkledger.config import Settings
from milkledger.domain.session import User, close_session, open_session
from milkledger.domain.sync import SyncCoordinator


def get_context(ctx: click.Context) -> SyncCoordinator:
    """Return the sync coordinator of the active user, opening it on first use.

    The session is loaded once per command and closed when the command ends.
    Exits with an error when no user is configured.
    """
    root = ctx.find_root()
    root.ensure_object(dict)
    coordinator = root.obj.get("context")
    if coordinator is not None:
        return coordinator

    settings: Settings = root.obj["settings"]
    if not settings.user:
        click.echo("Error: No user set. Pass --user or set MILKLEDGER_USER.", err=True)
        ctx.exit(1)

    coordinator = open_session(User(id=settings.user), settings)
    root.obj["context"] = coordinator
    root.call_on_close(lambda: close_session(coordinator))
    return coordinator
