"""Domain model entities for cuotas.

These are pure data classes representing business concepts, independent of
database schema. A ``Contract`` is always handed to the domain fully
hydrated: installments carry their payments and collaborators carry their
own installments. Derived values (installment status, progress) are never
stored on these classes; see ``cuotas.domain.status`` and
``cuotas.domain.progress``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Optional

from cuotas.domain.errors import ValidationError
from cuotas.domain.money import Currency, Money


class PaymentStatus(str, Enum):
    """Lifecycle of a submitted payment claim."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class PaymentMethod(str, Enum):
    """How the submitter says the money was paid."""

    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    YAPE = "YAPE"
    PLIN = "PLIN"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: "str | PaymentMethod") -> "PaymentMethod":
        """Return the method for a name, accepting dashes and any case."""
        if isinstance(value, PaymentMethod):
            return value
        normalized = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(m.value for m in cls)
            raise ValidationError(
                f"Unknown payment method '{value}'. Supported methods: {supported}"
            )


class InstallmentStatus(str, Enum):
    """Status derived from an installment's payments."""

    NO_PAYMENTS = "NO_PAYMENTS"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    PAID = "PAID"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Payment:
    """Payment claim submitted against one installment."""

    id: int
    installment_id: int
    amount: Money
    method: PaymentMethod
    status: PaymentStatus
    created_at: datetime
    reference: Optional[str] = None
    submitted_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    @property
    def currency(self) -> Currency:
        return self.amount.currency


@dataclass(frozen=True)
class Installment:
    """One scheduled partial payment ("cuota").

    ``collaborator_id`` is None for the client-facing schedule and set for a
    collaborator's pay schedule.
    """

    id: int
    contract_id: int
    sequence: int
    description: str
    amount: Money
    due_date: date
    collaborator_id: Optional[int] = None
    payments: tuple[Payment, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def currency(self) -> Currency:
        return self.amount.currency


@dataclass(frozen=True)
class ScheduledInstallment:
    """Installment produced by the scheduler before it is persisted."""

    sequence: int
    description: str
    amount: Money
    due_date: date


@dataclass(frozen=True)
class DeliverableAssignment:
    """Deliverable assigned to a contract."""

    id: int
    contract_id: int
    name: str
    is_completed: bool
    is_approved: bool
    assigned_at: datetime
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class Collaborator:
    """User assigned to a contract, with an independent pay schedule."""

    id: int
    contract_id: int
    user_id: str
    name: str
    assigned_at: datetime
    installments: tuple[Installment, ...] = ()


@dataclass(frozen=True)
class Contract:
    """Agreed engagement between a client and the company."""

    id: int
    name: str
    total: Money
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
    observation: Optional[str] = None
    installments: tuple[Installment, ...] = ()
    deliverables: tuple[DeliverableAssignment, ...] = ()
    collaborators: tuple[Collaborator, ...] = ()

    @property
    def currency(self) -> Currency:
        return self.total.currency

    def find_installment(self, installment_id: int) -> Optional[Installment]:
        """Find an installment in the client or any collaborator ledger."""
        for installment in self.installments:
            if installment.id == installment_id:
                return installment
        for collaborator in self.collaborators:
            for installment in collaborator.installments:
                if installment.id == installment_id:
                    return installment
        return None

    def find_collaborator(self, collaborator_id: int) -> Optional[Collaborator]:
        for collaborator in self.collaborators:
            if collaborator.id == collaborator_id:
                return collaborator
        return None


@dataclass(frozen=True)
class ContractPaymentStatus:
    """Aggregate payment status of one ledger."""

    fully_paid: bool
    paid_count: int
    total_count: int


@dataclass(frozen=True)
class ContractProgress:
    """Progress percentages for a contract, each in [0, 100]."""

    deliverables_percentage: int
    payment_percentage: int
    overall_progress: int


@dataclass(frozen=True)
class PaymentDecision:
    """Payload handed to the notification dispatcher after a verification."""

    payment_id: int
    installment_id: int
    contract_id: int
    status: PaymentStatus
    amount: Money
    decided_at: datetime
    collaborator_id: Optional[int] = None
    submitted_by: Optional[str] = None


@dataclass(frozen=True)
class PortfolioSummary:
    """Statistics across a list of contracts."""

    total_contracts: int
    active_contracts: int
    completed_contracts: int
    average_progress: int
    revenue_by_currency: dict[Currency, Money] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentStatistics:
    """Payment dashboard figures across a list of contracts.

    Amounts are reported per currency and never summed across currencies.
    Installment counts cover the client schedules only; a contract whose
    schedule has a single installment is paid up front, one with two or
    more is paid in installments and one without a schedule is neither.
    """

    total_contracts: int
    single_payment_contracts: int
    installment_contracts: int
    total_installments: int
    paid_installments: int
    pending_installments: int
    overdue_installments: int
    awaiting_verification: int
    paid_by_currency: dict[Currency, Money] = field(default_factory=dict)
    outstanding_by_currency: dict[Currency, Money] = field(default_factory=dict)
    in_verification_by_currency: dict[Currency, Money] = field(default_factory=dict)
