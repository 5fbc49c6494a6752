"""Shared rendering helpers for CLI views."""

import click

from cuotas.domain.entities import Installment, Payment
from cuotas.domain.views import InstallmentView, LedgerView


def progress_bar(percentage: int, width: int = 20) -> str:
    """Render a percentage as a fixed-width text bar."""
    filled = round(width * percentage / 100)
    return f"[{'#' * filled}{'.' * (width - filled)}] {percentage:3d}%"


def echo_installment_table(ledger: LedgerView, show_payments: bool = False) -> None:
    """Print one ledger's installments with their derived status."""
    if not ledger.installments:
        click.echo("No installments scheduled.")
        return

    click.echo(
        f"{'ID':<6} {'#':<4} {'Description':<24} {'Due':<12} {'Amount':>14} "
        f"{'Approved':>14}  {'Status':<16}"
    )
    click.echo("-" * 96)
    for view in ledger.installments:
        click.echo(_installment_row(view))
        if show_payments:
            for payment in view.installment.payments:
                click.echo(f"       {format_payment(payment)}")

    status = ledger.payment_status
    click.echo("-" * 96)
    click.echo(
        f"Paid installments: {status.paid_count}/{status.total_count}"
        f"{' (fully paid)' if status.fully_paid else ''}"
    )
    if ledger.overdue_count:
        click.echo(f"Overdue installments: {ledger.overdue_count}")
    if ledger.next_due is not None:
        click.echo(f"Next due: {format_installment_ref(ledger.next_due)}")


def _installment_row(view: InstallmentView) -> str:
    installment = view.installment
    flags = []
    if view.is_overdue:
        flags.append("overdue")
    if view.amount_mismatch:
        flags.append("amount differs")
    suffix = f" ({', '.join(flags)})" if flags else ""
    return (
        f"{installment.id:<6} {installment.sequence:<4} {installment.description[:24]:<24} "
        f"{installment.due_date.strftime('%d/%m/%Y'):<12} {installment.amount.format():>14} "
        f"{view.approved_amount.format():>14}  {view.label}{suffix}"
    )


def format_payment(payment: Payment) -> str:
    """One-line description of a payment."""
    parts = [
        f"Payment {payment.id}",
        payment.amount.format(),
        payment.method.value,
        payment.status.value,
    ]
    if payment.reference:
        parts.append(f"ref {payment.reference}")
    if payment.submitted_by:
        parts.append(f"by {payment.submitted_by}")
    return " | ".join(parts)


def format_installment_ref(installment: Installment) -> str:
    return (
        f"{installment.description} ({installment.amount.format()}) "
        f"on {installment.due_date.strftime('%d/%m/%Y')}"
    )
