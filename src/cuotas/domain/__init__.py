"""Domain layer for cuotas application."""

from cuotas.domain.contract import ContractService
from cuotas.domain.ledger import PaymentLedger
from cuotas.domain.schedule import ScheduleService, generate_schedule
from cuotas.domain.status import (
    contract_payment_status,
    installment_status,
    is_overdue,
)
from cuotas.domain.progress import (
    deliverables_percentage,
    overall_progress,
    payment_percentage,
)

__all__ = [
    "ContractService",
    "PaymentLedger",
    "ScheduleService",
    "generate_schedule",
    "installment_status",
    "is_overdue",
    "contract_payment_status",
    "deliverables_percentage",
    "payment_percentage",
    "overall_progress",
]
