"""View models shared by the admin, company and collaborator screens.

The admin, company and collaborator screens all render what these
builders return, so labels and progress are derived in one place.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from cuotas.domain.entities import (
    Collaborator,
    Contract,
    ContractPaymentStatus,
    ContractProgress,
    Installment,
    InstallmentStatus,
)
from cuotas.domain.money import Money
from cuotas.domain.progress import (
    completed_payments_total,
    contract_progress,
    outstanding_balance,
)
from cuotas.domain.status import (
    approved_amount,
    installment_status,
    is_overdue,
    ledger_payment_status,
    next_due_installment,
    pending_amount,
)

STATUS_LABELS = {
    InstallmentStatus.NO_PAYMENTS: "Pendiente",
    InstallmentStatus.PENDING_VERIFICATION: "En verificación",
    InstallmentStatus.PAID: "Pagado",
    InstallmentStatus.REJECTED: "Rechazado",
}


@dataclass(frozen=True)
class InstallmentView:
    installment: Installment
    status: InstallmentStatus
    label: str
    approved_amount: Money
    pending_amount: Money
    payment_count: int
    is_overdue: bool
    # Paid, but the verified amount differs from the installment amount
    amount_mismatch: bool


@dataclass(frozen=True)
class LedgerView:
    installments: tuple[InstallmentView, ...]
    payment_status: ContractPaymentStatus
    overdue_count: int
    next_due: Optional[Installment]


@dataclass(frozen=True)
class ContractOverview:
    contract: Contract
    progress: ContractProgress
    client_ledger: LedgerView
    completed_payments: Money
    outstanding: Money
    awaiting_verification: int


@dataclass(frozen=True)
class CollaboratorOverview:
    contract: Contract
    collaborator: Collaborator
    ledger: LedgerView


def build_installment_view(installment: Installment, today: date) -> InstallmentView:
    status = installment_status(installment)
    approved = approved_amount(installment)
    return InstallmentView(
        installment=installment,
        status=status,
        label=STATUS_LABELS[status],
        approved_amount=approved,
        pending_amount=pending_amount(installment),
        payment_count=len(installment.payments),
        is_overdue=is_overdue(installment, today),
        amount_mismatch=status == InstallmentStatus.PAID and approved != installment.amount,
    )


def build_ledger_view(installments: Sequence[Installment], today: date) -> LedgerView:
    views = tuple(build_installment_view(installment, today) for installment in installments)
    return LedgerView(
        installments=views,
        payment_status=ledger_payment_status(installments),
        overdue_count=sum(1 for view in views if view.is_overdue),
        next_due=next_due_installment(installments),
    )


def build_contract_overview(contract: Contract, today: date) -> ContractOverview:
    """Admin contract detail and company portal view of a contract."""
    client_ledger = build_ledger_view(contract.installments, today)
    return ContractOverview(
        contract=contract,
        progress=contract_progress(contract),
        client_ledger=client_ledger,
        completed_payments=completed_payments_total(contract),
        outstanding=outstanding_balance(contract),
        awaiting_verification=sum(
            1
            for view in client_ledger.installments
            if view.status == InstallmentStatus.PENDING_VERIFICATION
        ),
    )


def build_collaborator_overview(
    contract: Contract, collaborator: Collaborator, today: date
) -> CollaboratorOverview:
    """Collaborator payment portal view of their own pay schedule."""
    return CollaboratorOverview(
        contract=contract,
        collaborator=collaborator,
        ledger=build_ledger_view(collaborator.installments, today),
    )
