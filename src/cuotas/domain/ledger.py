"""Payment ledger domain service."""

from __future__ import annotations

from datetime import datetime, UTC
from typing import TYPE_CHECKING, Callable, Optional

from cuotas.domain.entities import (
    Installment,
    Payment,
    PaymentDecision,
    PaymentMethod,
    PaymentStatus,
)
from cuotas.domain.errors import (
    AlreadyDecidedError,
    NotFoundError,
    SubmitterMismatchError,
    ValidationError,
    collaborator_not_found,
    installment_not_found,
    payment_already_decided,
    payment_not_found,
    submitter_mismatch,
)
from cuotas.domain.money import Money
from cuotas.domain.notifications import NullNotifier, PaymentNotifier

if TYPE_CHECKING:
    from cuotas.database.base import Database


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PaymentLedger:
    """Append-only record of payment claims and their verification.

    The same ledger serves the client schedule and every collaborator pay
    schedule; which one a payment belongs to follows from its installment.
    """

    def __init__(
        self,
        db: Database,
        notifier: Optional[PaymentNotifier] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize payment ledger.

        Args:
            db: Database instance
            notifier: Dispatcher informed of every decision
            clock: Returns the current time; defaults to UTC now
        """
        self.db = db
        self.notifier = notifier if notifier is not None else NullNotifier()
        self.clock = clock if clock is not None else _utcnow

    def submit_payment(
        self,
        installment_id: int,
        amount: Money,
        method: PaymentMethod | str,
        reference: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> Payment:
        """Record a new PENDING payment claim against an installment.

        Earlier payments on the same installment are left untouched, so
        several pending claims can wait for the verifier at once. The amount
        may differ from the installment amount.

        Args:
            installment_id: Installment being paid
            amount: Amount the submitter claims to have paid
            method: Payment method
            reference: Optional operation number
            submitted_by: Identity of the company user or collaborator

        Returns:
            The stored payment

        Raises:
            NotFoundError: If the installment doesn't exist
            ValidationError: If amount is zero or in another currency
            SubmitterMismatchError: If a collaborator ledger receives a payment
                from anyone but that collaborator
        """
        installment = self.get_installment(installment_id)

        method = PaymentMethod.parse(method)
        if amount.is_zero():
            raise ValidationError("Payment amount must be greater than zero")
        if amount.currency != installment.currency:
            raise ValidationError(
                f"Payment currency {amount.currency.value} does not match "
                f"installment currency {installment.currency.value}"
            )

        if installment.collaborator_id is not None:
            collaborator = self.db.get_collaborator(installment.collaborator_id)
            if collaborator is None:
                raise NotFoundError(collaborator_not_found(installment.collaborator_id))
            if submitted_by != collaborator.user_id:
                raise SubmitterMismatchError(
                    submitter_mismatch(collaborator.id, submitted_by)
                )

        if reference is not None:
            reference = reference.strip() or None

        payment_id = self.db.create_payment(
            installment_id=installment_id,
            amount=amount.amount,
            currency=amount.currency.value,
            method=method.value,
            reference=reference,
            submitted_by=submitted_by,
        )
        self.db.touch_contract(installment.contract_id)
        return self.db.get_payment(payment_id)

    def decide_payment(self, payment_id: int, outcome: PaymentStatus | str) -> Payment:
        """Verify or reject a pending payment.

        Args:
            payment_id: Payment ID
            outcome: COMPLETED or FAILED

        Returns:
            The payment after the transition

        Raises:
            NotFoundError: If the payment doesn't exist
            ValidationError: If outcome is not a terminal status
            AlreadyDecidedError: If the payment is no longer PENDING
        """
        outcome = self._parse_outcome(outcome)

        payment = self.db.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        if payment.status != PaymentStatus.PENDING:
            raise AlreadyDecidedError(
                payment_already_decided(payment_id, payment.status.value)
            )

        decided_at = self.clock()
        if not self.db.decide_payment(payment_id, outcome, decided_at):
            # Another verifier got there between our read and the update
            current = self.db.get_payment(payment_id)
            raise AlreadyDecidedError(
                payment_already_decided(payment_id, current.status.value)
            )

        installment = self.db.get_installment(payment.installment_id)
        self.db.touch_contract(installment.contract_id)
        decided = self.db.get_payment(payment_id)

        self.notifier.payment_decided(
            PaymentDecision(
                payment_id=decided.id,
                installment_id=installment.id,
                contract_id=installment.contract_id,
                status=decided.status,
                amount=decided.amount,
                decided_at=decided_at,
                collaborator_id=installment.collaborator_id,
                submitted_by=decided.submitted_by,
            )
        )
        return decided

    def approve_payment(self, payment_id: int) -> Payment:
        """Mark a pending payment as COMPLETED."""
        return self.decide_payment(payment_id, PaymentStatus.COMPLETED)

    def reject_payment(self, payment_id: int) -> Payment:
        """Mark a pending payment as FAILED."""
        return self.decide_payment(payment_id, PaymentStatus.FAILED)

    def get_installment(self, installment_id: int) -> Installment:
        installment = self.db.get_installment(installment_id)
        if installment is None:
            raise NotFoundError(installment_not_found(installment_id))
        return installment

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.db.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def pending_payments(self, contract_id: Optional[int] = None) -> list[Payment]:
        """Payments awaiting verification, oldest first."""
        return self.db.list_payments(status=PaymentStatus.PENDING, contract_id=contract_id)

    @staticmethod
    def _parse_outcome(outcome: PaymentStatus | str) -> PaymentStatus:
        if not isinstance(outcome, PaymentStatus):
            try:
                outcome = PaymentStatus(str(outcome).strip().upper())
            except ValueError:
                raise ValidationError(f"Unknown payment outcome '{outcome}'")
        if not outcome.is_terminal:
            raise ValidationError("A payment can only be decided as COMPLETED or FAILED")
        return outcome
