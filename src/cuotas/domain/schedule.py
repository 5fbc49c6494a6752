"""Installment schedule generation and the schedule domain service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from cuotas.domain.entities import Contract, Installment, ScheduledInstallment
from cuotas.domain.errors import (
    InvalidScheduleError,
    NotFoundError,
    ScheduleLockedError,
    ValidationError,
    collaborator_not_found,
    contract_not_found,
    installment_not_found,
    schedule_does_not_reconcile,
    schedule_locked,
)
from cuotas.domain.money import Money, sum_money
from cuotas.utils.date_parser import add_months

if TYPE_CHECKING:
    from cuotas.database.base import Database

MAX_INSTALLMENTS = 60
DEFAULT_DESCRIPTION = "Cuota"
SINGLE_PAYMENT_DESCRIPTION = "Pago único"


def generate_schedule(
    total: Money,
    count: int,
    start_date: date,
    description: str = DEFAULT_DESCRIPTION,
) -> list[ScheduledInstallment]:
    """Split ``total`` into ``count`` monthly installments.

    Every installment but the last gets ``floor(total / count)`` at minor-unit
    precision; the last one absorbs the remainder so the amounts always add
    up to ``total`` exactly. Installment ``i`` is due ``i`` months after
    ``start_date``.

    Args:
        total: Amount to split
        count: Number of installments (1 to MAX_INSTALLMENTS)
        start_date: Date the schedule is counted from
        description: Label prefix, rendered as "<description> i de count"

    Returns:
        Installments in sequence order

    Raises:
        InvalidScheduleError: If count or total are out of range
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidScheduleError(f"Installment count must be an integer, got {count!r}")
    if count < 1:
        raise InvalidScheduleError(f"Installment count must be at least 1, got {count}")
    if count > MAX_INSTALLMENTS:
        raise InvalidScheduleError(
            f"Installment count cannot exceed {MAX_INSTALLMENTS}, got {count}"
        )
    if total.is_zero():
        raise InvalidScheduleError("Schedule total must be greater than zero")

    base = total.split_floor(count)
    last = total - base * (count - 1)

    label = description.strip() or DEFAULT_DESCRIPTION
    return [
        ScheduledInstallment(
            sequence=i,
            description=f"{label} {i} de {count}",
            amount=last if i == count else base,
            due_date=add_months(start_date, i),
        )
        for i in range(1, count + 1)
    ]


def single_payment_schedule(total: Money, due_date: date) -> list[ScheduledInstallment]:
    """Schedule the whole total as one installment due on ``due_date``."""
    if total.is_zero():
        raise InvalidScheduleError("Schedule total must be greater than zero")
    return [
        ScheduledInstallment(
            sequence=1,
            description=SINGLE_PAYMENT_DESCRIPTION,
            amount=total,
            due_date=due_date,
        )
    ]


def schedule_difference(total: Money, amounts: Sequence[Money]) -> Decimal:
    """Return ``total`` minus the sum of ``amounts``.

    Zero when they reconcile, negative when the amounts exceed the total.
    """
    scheduled = sum_money(amounts, total.currency)
    return total.amount - scheduled.amount


def custom_schedule(
    lines: Sequence[tuple[str, Money, date]],
    total: Optional[Money] = None,
) -> list[ScheduledInstallment]:
    """Build a schedule from explicit (description, amount, due date) lines.

    When ``total`` is given the amounts must add up to it exactly.

    Raises:
        InvalidScheduleError: If there are no lines, too many lines, a zero
            amount, or the lines do not reconcile with ``total``
    """
    if not lines:
        raise InvalidScheduleError("A schedule needs at least one installment")
    if len(lines) > MAX_INSTALLMENTS:
        raise InvalidScheduleError(
            f"Installment count cannot exceed {MAX_INSTALLMENTS}, got {len(lines)}"
        )

    currency = lines[0][1].currency
    installments = []
    for index, (description, amount, due_date) in enumerate(lines, start=1):
        if amount.currency != currency:
            raise InvalidScheduleError("All installments must use the same currency")
        if amount.is_zero():
            raise InvalidScheduleError(f"Installment {index} amount must be greater than zero")
        installments.append(
            ScheduledInstallment(
                sequence=index,
                description=description.strip() or f"{DEFAULT_DESCRIPTION} {index}",
                amount=amount,
                due_date=due_date,
            )
        )

    if total is not None:
        if total.currency != currency:
            raise InvalidScheduleError(
                f"Installments are in {currency.value} but the total is in {total.currency.value}"
            )
        scheduled = sum_money((i.amount for i in installments), currency)
        if scheduled != total:
            raise InvalidScheduleError(schedule_does_not_reconcile(total.amount, scheduled.amount))

    return installments


class ScheduleService:
    """Service for creating and editing installment schedules."""

    def __init__(self, db: Database):
        """Initialize schedule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_schedule(
        self,
        contract_id: int,
        count: int,
        start_date: Optional[date] = None,
        description: str = DEFAULT_DESCRIPTION,
        collaborator_id: Optional[int] = None,
        total: Optional[Money] = None,
    ) -> list[Installment]:
        """Generate and store an evenly split monthly schedule.

        Args:
            contract_id: Contract ID
            count: Number of installments
            start_date: Date to count months from (defaults to contract start date)
            description: Label prefix for each installment
            collaborator_id: Collaborator ledger to schedule, None for the client ledger
            total: Amount to split; required for collaborator ledgers,
                defaults to the contract total for the client ledger

        Returns:
            Stored installments in sequence order

        Raises:
            NotFoundError: If contract or collaborator doesn't exist
            InvalidScheduleError: If count or total are out of range
            ScheduleLockedError: If the ledger already has payments
        """
        contract = self._require_contract(contract_id)
        schedule_total = self._resolve_total(contract, collaborator_id, total)
        drafts = generate_schedule(
            schedule_total,
            count,
            start_date if start_date is not None else contract.start_date,
            description,
        )
        return self._store(contract_id, drafts, collaborator_id)

    def create_single_payment(
        self,
        contract_id: int,
        due_date: Optional[date] = None,
        collaborator_id: Optional[int] = None,
        total: Optional[Money] = None,
    ) -> list[Installment]:
        """Store a one-installment schedule due on ``due_date`` (default: contract end date)."""
        contract = self._require_contract(contract_id)
        schedule_total = self._resolve_total(contract, collaborator_id, total)
        drafts = single_payment_schedule(
            schedule_total, due_date if due_date is not None else contract.end_date
        )
        return self._store(contract_id, drafts, collaborator_id)

    def create_custom_schedule(
        self,
        contract_id: int,
        lines: Sequence[tuple[str, Money, date]],
        collaborator_id: Optional[int] = None,
    ) -> list[Installment]:
        """Store explicit installment lines.

        Client schedules must add up to the contract total; collaborator
        schedules are free-form since a collaborator fee is not tied to it.
        """
        contract = self._require_contract(contract_id)
        if collaborator_id is None:
            drafts = custom_schedule(lines, total=contract.total)
        else:
            self._require_collaborator(contract, collaborator_id)
            drafts = custom_schedule(lines)
            if drafts[0].amount.currency != contract.currency:
                raise InvalidScheduleError(
                    f"Collaborator installments must be in {contract.currency.value}"
                )
        return self._store(contract_id, drafts, collaborator_id)

    def update_due_date(self, installment_id: int, due_date: date) -> Installment:
        """Replace an installment's due date.

        Allowed at any time, including after payments were recorded.
        """
        installment = self.db.get_installment(installment_id)
        if installment is None:
            raise NotFoundError(installment_not_found(installment_id))
        self.db.update_installment_due_date(installment_id, due_date)
        self.db.touch_contract(installment.contract_id)
        return self.db.get_installment(installment_id)

    def list_installments(
        self, contract_id: int, collaborator_id: Optional[int] = None
    ) -> list[Installment]:
        """List one ledger's installments."""
        contract = self._require_contract(contract_id)
        if collaborator_id is not None:
            self._require_collaborator(contract, collaborator_id)
        return self.db.list_installments(contract_id, collaborator_id)

    def is_locked(self, contract_id: int, collaborator_id: Optional[int] = None) -> bool:
        """Return True when the ledger has payment history."""
        return self.db.count_ledger_payments(contract_id, collaborator_id) > 0

    def _store(
        self,
        contract_id: int,
        drafts: list[ScheduledInstallment],
        collaborator_id: Optional[int],
    ) -> list[Installment]:
        payment_count = self.db.count_ledger_payments(contract_id, collaborator_id)
        if payment_count > 0:
            raise ScheduleLockedError(
                schedule_locked(contract_id, payment_count, collaborator_id)
            )
        # replace_installments re-checks inside its own transaction
        self.db.replace_installments(contract_id, drafts, collaborator_id)
        self.db.touch_contract(contract_id)
        return self.db.list_installments(contract_id, collaborator_id)

    def _require_contract(self, contract_id: int) -> Contract:
        contract = self.db.get_contract(contract_id)
        if contract is None:
            raise NotFoundError(contract_not_found(contract_id))
        return contract

    def _require_collaborator(self, contract: Contract, collaborator_id: int) -> None:
        if contract.find_collaborator(collaborator_id) is None:
            raise NotFoundError(collaborator_not_found(collaborator_id))

    def _resolve_total(
        self, contract: Contract, collaborator_id: Optional[int], total: Optional[Money]
    ) -> Money:
        if collaborator_id is None:
            if total is not None and total != contract.total:
                raise ValidationError(
                    "The client schedule always splits the contract total"
                )
            return contract.total
        self._require_collaborator(contract, collaborator_id)
        if total is None:
            raise ValidationError("A collaborator schedule needs an explicit total")
        if total.currency != contract.currency:
            raise ValidationError(
                f"Collaborator total must be in {contract.currency.value}"
            )
        return total
