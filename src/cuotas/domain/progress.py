"""Contract progress calculations.

Every view (admin contract detail, company portal, collaborator portal)
reads progress from here. Overall progress is the equal-weight average of
deliverable completion and payment completion.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from cuotas.domain.entities import (
    Contract,
    ContractProgress,
    InstallmentStatus,
    PaymentStatus,
    PaymentStatistics,
    PortfolioSummary,
)
from cuotas.domain.money import Currency, Money, ratio_percentage, sum_money
from cuotas.domain.status import (
    approved_amount,
    installment_status,
    is_overdue,
    pending_amount,
)


def completed_payments_total(contract: Contract) -> Money:
    """Uncapped sum of COMPLETED payments on the client installments."""
    return sum_money(
        (
            payment.amount
            for installment in contract.installments
            for payment in installment.payments
            if payment.status == PaymentStatus.COMPLETED
        ),
        contract.currency,
    )


def outstanding_balance(contract: Contract) -> Money:
    """Part of the contract total not yet covered by COMPLETED payments.

    Zero once the contract is paid in full, including when it was overpaid.
    """
    paid = completed_payments_total(contract)
    if paid >= contract.total:
        return Money.zero(contract.currency)
    return contract.total - paid


def deliverables_percentage(contract: Contract) -> int:
    """Percentage of deliverable assignments marked completed."""
    total = len(contract.deliverables)
    completed = sum(1 for d in contract.deliverables if d.is_completed)
    return ratio_percentage(completed, total)


def payment_percentage(contract: Contract) -> int:
    """Percentage of the contract total covered by COMPLETED payments.

    Capped at 100 for display; use ``completed_payments_total`` for the
    underlying amount when over-payment matters.
    """
    paid = completed_payments_total(contract)
    return min(100, ratio_percentage(paid.minor_units, contract.total.minor_units))


def overall_progress(contract: Contract) -> int:
    """Equal-weight average of deliverables and payment percentages."""
    return _average(deliverables_percentage(contract), payment_percentage(contract))


def contract_progress(contract: Contract) -> ContractProgress:
    deliverables = deliverables_percentage(contract)
    payment = payment_percentage(contract)
    return ContractProgress(
        deliverables_percentage=deliverables,
        payment_percentage=payment,
        overall_progress=_average(deliverables, payment),
    )


def portfolio_summary(contracts: Sequence[Contract]) -> PortfolioSummary:
    """Summarize a list of contracts for dashboard cards.

    A contract counts as completed once its overall progress reaches 100.
    """
    progress_values = [overall_progress(contract) for contract in contracts]
    revenue: dict[Currency, Money] = {}
    for contract in contracts:
        current = revenue.get(contract.currency, Money.zero(contract.currency))
        revenue[contract.currency] = current + contract.total

    average = 0
    if progress_values:
        average = int(
            (Decimal(sum(progress_values)) / Decimal(len(progress_values))).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
        )

    return PortfolioSummary(
        total_contracts=len(contracts),
        active_contracts=sum(1 for value in progress_values if value < 100),
        completed_contracts=sum(1 for value in progress_values if value == 100),
        average_progress=average,
        revenue_by_currency=revenue,
    )


def payment_statistics(
    contracts: Sequence[Contract], today: date | datetime
) -> PaymentStatistics:
    """Aggregate the client ledgers of several contracts for the payment dashboard.

    Args:
        contracts: Hydrated contracts to aggregate
        today: Reference date for overdue detection

    Returns:
        PaymentStatistics with installment counts and per-currency amounts
    """
    paid: dict[Currency, Money] = {}
    outstanding: dict[Currency, Money] = {}
    in_verification: dict[Currency, Money] = {}
    statuses: list[InstallmentStatus] = []
    overdue = 0

    for contract in contracts:
        currency = contract.currency
        zero = Money.zero(currency)
        contract_paid = sum_money(
            (approved_amount(installment) for installment in contract.installments), currency
        )
        paid[currency] = paid.get(currency, zero) + contract_paid
        outstanding[currency] = outstanding.get(currency, zero) + outstanding_balance(contract)
        in_verification[currency] = in_verification.get(currency, zero) + sum_money(
            (pending_amount(installment) for installment in contract.installments), currency
        )
        for installment in contract.installments:
            statuses.append(installment_status(installment))
            if is_overdue(installment, today):
                overdue += 1

    paid_count = statuses.count(InstallmentStatus.PAID)
    return PaymentStatistics(
        total_contracts=len(contracts),
        single_payment_contracts=sum(1 for c in contracts if len(c.installments) == 1),
        installment_contracts=sum(1 for c in contracts if len(c.installments) > 1),
        total_installments=len(statuses),
        paid_installments=paid_count,
        pending_installments=len(statuses) - paid_count,
        overdue_installments=overdue,
        awaiting_verification=statuses.count(InstallmentStatus.PENDING_VERIFICATION),
        paid_by_currency=paid,
        outstanding_by_currency=outstanding,
        in_verification_by_currency=in_verification,
    )


def _average(first: int, second: int) -> int:
    return int(
        (Decimal(first + second) / Decimal(2)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )
