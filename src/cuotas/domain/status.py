"""Installment and ledger status resolution.

All functions here are pure: they read the payments currently attached to
the entities they receive and never cache or mutate anything, so calling
them repeatedly on the same snapshot always gives the same answer.
"""

from datetime import date, datetime
from typing import Iterable, Sequence

from cuotas.domain.entities import (
    Collaborator,
    Contract,
    ContractPaymentStatus,
    Installment,
    InstallmentStatus,
    PaymentStatus,
)
from cuotas.domain.money import Money, sum_money


def installment_status(installment: Installment) -> InstallmentStatus:
    """Derive an installment's status from its payments.

    Priority order: a single COMPLETED payment makes the installment PAID
    regardless of the amount paid; otherwise any PENDING payment means it is
    awaiting verification; otherwise any FAILED payment means REJECTED; an
    installment without payments has NO_PAYMENTS.
    """
    statuses = {payment.status for payment in installment.payments}
    if PaymentStatus.COMPLETED in statuses:
        return InstallmentStatus.PAID
    if PaymentStatus.PENDING in statuses:
        return InstallmentStatus.PENDING_VERIFICATION
    if PaymentStatus.FAILED in statuses:
        return InstallmentStatus.REJECTED
    return InstallmentStatus.NO_PAYMENTS


def is_overdue(installment: Installment, today: date | datetime) -> bool:
    """Return True when the due date has passed and the installment is unpaid."""
    if isinstance(today, datetime):
        today = today.date()
    return installment.due_date < today and installment_status(installment) != InstallmentStatus.PAID


def approved_amount(installment: Installment) -> Money:
    """Sum of COMPLETED payments on an installment."""
    return sum_money(
        (p.amount for p in installment.payments if p.status == PaymentStatus.COMPLETED),
        installment.currency,
    )


def pending_amount(installment: Installment) -> Money:
    """Sum of payments still awaiting verification."""
    return sum_money(
        (p.amount for p in installment.payments if p.status == PaymentStatus.PENDING),
        installment.currency,
    )


def ledger_payment_status(installments: Sequence[Installment]) -> ContractPaymentStatus:
    """Aggregate status for one ledger (client or collaborator).

    A ledger with no installments is not considered fully paid.
    """
    paid_count = sum(
        1 for installment in installments if installment_status(installment) == InstallmentStatus.PAID
    )
    total_count = len(installments)
    return ContractPaymentStatus(
        fully_paid=total_count > 0 and paid_count == total_count,
        paid_count=paid_count,
        total_count=total_count,
    )


def contract_payment_status(contract: Contract) -> ContractPaymentStatus:
    """Aggregate status of the contract's client-facing installments."""
    return ledger_payment_status(contract.installments)


def collaborator_payment_status(collaborator: Collaborator) -> ContractPaymentStatus:
    """Aggregate status of a collaborator's pay schedule."""
    return ledger_payment_status(collaborator.installments)


def overdue_installments(installments: Iterable[Installment], today: date | datetime) -> list[Installment]:
    """Return the installments that are overdue on ``today``."""
    return [installment for installment in installments if is_overdue(installment, today)]


def next_due_installment(installments: Iterable[Installment]) -> Installment | None:
    """Return the earliest installment that is not yet paid."""
    unpaid = [
        installment
        for installment in installments
        if installment_status(installment) != InstallmentStatus.PAID
    ]
    if not unpaid:
        return None
    return min(unpaid, key=lambda installment: (installment.due_date, installment.sequence))
