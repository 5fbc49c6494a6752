"""Payment submission and verification commands."""

import click

from cuotas.cli.contract_resolution import resolve_contract_or_exit
from cuotas.cli.error_handling import handle_domain_error
from cuotas.cli.formatting import format_payment
from cuotas.cli.notifications import EchoNotifier
from cuotas.domain.contract import ContractService
from cuotas.domain.entities import PaymentMethod, PaymentStatus
from cuotas.domain.errors import DomainError
from cuotas.domain.ledger import PaymentLedger
from cuotas.domain.money import Money
from cuotas.domain.status import installment_status
from cuotas.domain.views import STATUS_LABELS
from cuotas.utils.amount_parser import parse_amount


@click.group()
def payment_group():
    """Submit and verify payments."""
    pass


@payment_group.command("submit")
@click.argument("installment_id", type=int)
@click.option("--amount", help="Amount paid (default: the installment amount)")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default=PaymentMethod.BANK_TRANSFER.value,
    show_default=True,
    help="Payment method",
)
@click.option("--reference", help="Operation number")
@click.option("--by", "submitted_by", help="Submitter identity (required for collaborator schedules)")
@click.pass_context
def submit_payment(
    ctx,
    installment_id: int,
    amount: str | None,
    method: str,
    reference: str | None,
    submitted_by: str | None,
):
    """Record a payment against an installment for verification.

    Examples:
        cuotas payment submit 3 --method YAPE --reference 00012345
        cuotas payment submit 3 --amount 150.00 --method CASH
        cuotas payment submit 9 --by u-42
    """
    db = ctx.obj["db"]
    ledger = PaymentLedger(db)

    try:
        installment = ledger.get_installment(installment_id)
        money = (
            Money.of(parse_amount(amount), installment.currency)
            if amount is not None
            else installment.amount
        )
        payment = ledger.submit_payment(
            installment_id,
            money,
            method,
            reference=reference,
            submitted_by=submitted_by,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Submitted payment {payment.id} for verification")
    click.echo(f"  Installment: {installment.description}")
    click.echo(f"  Amount: {payment.amount.format()}")
    if payment.amount != installment.amount:
        click.echo(f"  Note: installment amount is {installment.amount.format()}")


def _decide(ctx, payment_id: int, outcome: PaymentStatus) -> None:
    db = ctx.obj["db"]
    ledger = PaymentLedger(db, notifier=EchoNotifier())

    try:
        payment = ledger.decide_payment(payment_id, outcome)
        installment = ledger.get_installment(payment.installment_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    verb = "Approved" if outcome == PaymentStatus.COMPLETED else "Rejected"
    click.echo(f"{verb} payment {payment.id}")
    click.echo(
        f"  {installment.description}: {STATUS_LABELS[installment_status(installment)]}"
    )


@payment_group.command("approve")
@click.argument("payment_id", type=int)
@click.pass_context
def approve_payment(ctx, payment_id: int):
    """Mark a pending payment as verified (COMPLETED)."""
    _decide(ctx, payment_id, PaymentStatus.COMPLETED)


@payment_group.command("reject")
@click.argument("payment_id", type=int)
@click.pass_context
def reject_payment(ctx, payment_id: int):
    """Mark a pending payment as rejected (FAILED)."""
    _decide(ctx, payment_id, PaymentStatus.FAILED)


@payment_group.command("pending")
@click.option("--contract", help="Only payments for this contract (name or ID)")
@click.pass_context
def pending_payments(ctx, contract: str | None):
    """List payments awaiting verification."""
    db = ctx.obj["db"]
    ledger = PaymentLedger(db)

    contract_id = None
    if contract:
        contract_id = resolve_contract_or_exit(ctx, ContractService(db), contract)

    payments = ledger.pending_payments(contract_id=contract_id)
    if not payments:
        click.echo("No payments awaiting verification.")
        return

    click.echo(f"\n{len(payments)} payment(s) awaiting verification:")
    click.echo("-" * 80)
    for payment in payments:
        click.echo(f"{format_payment(payment)} | installment {payment.installment_id}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
