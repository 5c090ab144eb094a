"""Payment commands."""

import click
from milkledger.cli.context import get_context
from milkledger.cli.date_filters import parse_date_or_exit
from milkledger.cli.error_handling import handle_domain_error
from milkledger.cli.person_resolution import resolve_person_or_exit
from milkledger.domain.errors import DomainError
from milkledger.domain.payment import PaymentService
from milkledger.utils.number_parser import parse_number


@click.group()
def payment_group():
    """Record payments given to or received from people."""
    pass


def _parse_amount_or_exit(ctx, amount: str) -> float:
    try:
        return parse_number(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@payment_group.command("add")
@click.argument("person", metavar="PERSON")
@click.option("--amount", required=True, help="Payment amount (e.g., 500 or ₹1,250.50)")
@click.option("--date", "payment_date", default="today", show_default=True, help="Payment date")
@click.option("--comment", default="", help="Free-text comment")
@click.pass_context
def add_payment(ctx, person: str, amount: str, payment_date: str, comment: str):
    """Record a payment.

    Village payments are money given to the person; city and dairy payments
    are money received.

    Examples:
        milkledger payment add "Ramesh" --amount 500 --comment "advance"
    """
    service = PaymentService(get_context(ctx))
    person_id = resolve_person_or_exit(ctx, service.person_service, person)
    day = parse_date_or_exit(ctx, payment_date)
    value = _parse_amount_or_exit(ctx, amount)

    try:
        payment = service.record_payment(person_id, day, value, comment)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Recorded {payment.type.value} payment of ₹{payment.amount:,.2f} "
        f"for {payment.person_name} on {payment.date} (ID: {payment.id})"
    )


@payment_group.command("list")
@click.option(
    "--category",
    type=click.Choice(["village", "city", "dairy"], case_sensitive=False),
    help="Only payments of this business line",
)
@click.option("--date", "on_date", help="Only payments on this date")
@click.option("--person", help="Person name or ID")
@click.pass_context
def list_payments(ctx, category: str | None, on_date: str | None, person: str | None):
    """List payments."""
    service = PaymentService(get_context(ctx))

    person_id = resolve_person_or_exit(ctx, service.person_service, person) if person else None
    day = parse_date_or_exit(ctx, on_date) if on_date else None

    payments = service.list_payments(category=category, on_date=day, person_id=person_id)
    if not payments:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {len(payments)} payment(s):")
    click.echo("-" * 100)
    for payment in payments:
        click.echo(
            f"{str(payment.date):<12} {payment.person_name[:20]:<20} {payment.category.value:<8} "
            f"{payment.type.value:<9} ₹{payment.amount:>12,.2f}  {payment.comment[:25]:<25} {payment.id}"
        )
    click.echo("-" * 100)
    click.echo(f"Total: ₹{sum(p.amount for p in payments):,.2f}")


@payment_group.command("edit")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.option("--person", help="Move the payment to this person (name or ID)")
@click.option("--amount", help="New amount")
@click.option("--comment", help="New comment")
@click.pass_context
def edit_payment(ctx, payment_id: str, person: str | None, amount: str | None, comment: str | None):
    """Edit a payment. Only the given fields change."""
    service = PaymentService(get_context(ctx))

    person_id = resolve_person_or_exit(ctx, service.person_service, person) if person else None
    value = _parse_amount_or_exit(ctx, amount) if amount is not None else None

    try:
        payment = service.update_payment(payment_id, person_id=person_id, amount=value, comment=comment)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated payment {payment.id}")


@payment_group.command("delete")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.pass_context
def delete_payment(ctx, payment_id: str):
    """Delete a payment."""
    service = PaymentService(get_context(ctx))
    try:
        service.delete_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted payment {payment_id}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
