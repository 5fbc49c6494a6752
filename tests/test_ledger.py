"""Tests for the payment ledger."""

import pytest
from datetime import date, datetime, UTC

from cuotas.domain.entities import InstallmentStatus, PaymentMethod, PaymentStatus
from cuotas.domain.errors import (
    AlreadyDecidedError,
    NotFoundError,
    SubmitterMismatchError,
    ValidationError,
)
from cuotas.domain.ledger import PaymentLedger
from cuotas.domain.money import Money
from cuotas.domain.progress import payment_percentage
from cuotas.domain.status import installment_status


def pen(amount):
    return Money.of(amount, "PEN")


class TestSubmitPayment:
    def test_submit_creates_pending_payment(self, ledger, sample_schedule):
        payment = ledger.submit_payment(
            sample_schedule[0].id, pen("300.00"), "yape", reference=" 00012345 "
        )

        assert payment.status == PaymentStatus.PENDING
        assert payment.method == PaymentMethod.YAPE
        assert payment.reference == "00012345"
        assert payment.amount == pen("300.00")
        assert payment.approved_at is None

        installment = ledger.get_installment(sample_schedule[0].id)
        assert installment_status(installment) == InstallmentStatus.PENDING_VERIFICATION

    def test_blank_reference_stored_as_none(self, ledger, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH", reference="  ")
        assert payment.reference is None

    def test_multiple_pending_payments_allowed(self, ledger, sample_schedule):
        ledger.submit_payment(sample_schedule[0].id, pen("100.00"), "CASH")
        ledger.submit_payment(sample_schedule[0].id, pen("200.00"), "CASH")

        installment = ledger.get_installment(sample_schedule[0].id)
        assert len(installment.payments) == 2
        assert all(p.status == PaymentStatus.PENDING for p in installment.payments)

    def test_amount_may_differ_from_installment(self, ledger, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("150.00"), "CASH")
        assert payment.amount == pen("150.00")

    def test_zero_amount_rejected(self, ledger, sample_schedule):
        with pytest.raises(ValidationError, match="greater than zero"):
            ledger.submit_payment(sample_schedule[0].id, pen("0"), "CASH")

    def test_currency_mismatch_rejected(self, ledger, sample_schedule):
        with pytest.raises(ValidationError, match="does not match"):
            ledger.submit_payment(sample_schedule[0].id, Money.of("300.00", "USD"), "CASH")

    def test_unknown_method_rejected(self, ledger, sample_schedule):
        with pytest.raises(ValidationError, match="Unknown payment method"):
            ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CHEQUE")

    def test_unknown_installment(self, ledger):
        with pytest.raises(NotFoundError, match="Installment 404"):
            ledger.submit_payment(404, pen("300.00"), "CASH")

    def test_submission_touches_contract(
        self, ledger, contract_service, sample_contract, sample_schedule
    ):
        before = contract_service.require_contract(sample_contract.id).updated_at
        ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        after = contract_service.require_contract(sample_contract.id).updated_at
        assert after >= before


class TestDecidePayment:
    def test_approve_marks_installment_paid(self, ledger, notifier, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")

        approved = ledger.approve_payment(payment.id)

        assert approved.status == PaymentStatus.COMPLETED
        assert approved.approved_at is not None
        assert approved.decided_at is not None
        installment = ledger.get_installment(sample_schedule[0].id)
        assert installment_status(installment) == InstallmentStatus.PAID

    def test_reject_marks_installment_rejected(self, ledger, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")

        rejected = ledger.reject_payment(payment.id)

        assert rejected.status == PaymentStatus.FAILED
        assert rejected.approved_at is None
        installment = ledger.get_installment(sample_schedule[0].id)
        assert installment_status(installment) == InstallmentStatus.REJECTED

    def test_resubmission_after_rejection(self, ledger, sample_schedule):
        first = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        ledger.reject_payment(first.id)
        ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "BANK_TRANSFER")

        installment = ledger.get_installment(sample_schedule[0].id)
        assert installment_status(installment) == InstallmentStatus.PENDING_VERIFICATION

    @pytest.mark.parametrize("second", ["approve_payment", "reject_payment"])
    def test_decision_is_final(self, ledger, notifier, sample_schedule, second):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        ledger.approve_payment(payment.id)

        with pytest.raises(AlreadyDecidedError, match="COMPLETED"):
            getattr(ledger, second)(payment.id)

        assert ledger.get_payment(payment.id).status == PaymentStatus.COMPLETED
        assert len(notifier.decisions) == 1

    def test_outcome_must_be_terminal(self, ledger, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        with pytest.raises(ValidationError):
            ledger.decide_payment(payment.id, PaymentStatus.PENDING)
        with pytest.raises(ValidationError):
            ledger.decide_payment(payment.id, "LOST")

    def test_outcome_accepts_strings(self, ledger, sample_schedule):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        assert ledger.decide_payment(payment.id, "failed").status == PaymentStatus.FAILED

    def test_unknown_payment(self, ledger):
        with pytest.raises(NotFoundError, match="Payment 77"):
            ledger.approve_payment(77)

    def test_notifier_receives_decision(
        self, ledger, notifier, sample_contract, sample_schedule
    ):
        payment = ledger.submit_payment(
            sample_schedule[1].id, pen("300.00"), "PLIN", submitted_by="empresa"
        )
        ledger.reject_payment(payment.id)

        assert len(notifier.decisions) == 1
        decision = notifier.decisions[0]
        assert decision.payment_id == payment.id
        assert decision.installment_id == sample_schedule[1].id
        assert decision.contract_id == sample_contract.id
        assert decision.status == PaymentStatus.FAILED
        assert decision.amount == pen("300.00")
        assert decision.submitted_by == "empresa"
        assert decision.collaborator_id is None

    def test_clock_sets_decision_time(self, temp_db, sample_schedule):
        fixed = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
        ledger = PaymentLedger(temp_db, clock=lambda: fixed)
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")

        approved = ledger.approve_payment(payment.id)

        assert approved.decided_at.replace(tzinfo=None) == fixed.replace(tzinfo=None)

    def test_approval_updates_payment_percentage(
        self, ledger, contract_service, sample_contract, sample_schedule
    ):
        payment = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        contract = contract_service.require_contract(sample_contract.id)
        assert payment_percentage(contract) == 0

        ledger.approve_payment(payment.id)

        contract = contract_service.require_contract(sample_contract.id)
        assert payment_percentage(contract) == 25


class TestPendingQueue:
    def test_pending_payments_oldest_first(self, ledger, sample_schedule):
        first = ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        second = ledger.submit_payment(sample_schedule[1].id, pen("300.00"), "CASH")
        third = ledger.submit_payment(sample_schedule[2].id, pen("300.00"), "CASH")
        ledger.approve_payment(second.id)

        assert [p.id for p in ledger.pending_payments()] == [first.id, third.id]

    def test_pending_payments_by_contract(
        self, ledger, contract_service, schedule_service, sample_contract, sample_schedule
    ):
        other_id = contract_service.create_contract(
            "Otro", pen("100.00"), date(2024, 1, 1), date(2024, 2, 1)
        )
        other = schedule_service.create_single_payment(other_id)
        ledger.submit_payment(sample_schedule[0].id, pen("300.00"), "CASH")
        ledger.submit_payment(other[0].id, pen("100.00"), "CASH")

        pending = ledger.pending_payments(contract_id=other_id)
        assert [p.installment_id for p in pending] == [other[0].id]


class TestCollaboratorLedger:
    @pytest.fixture
    def pay_schedule(self, schedule_service, sample_contract, sample_collaborator):
        return schedule_service.create_schedule(
            sample_contract.id, 2, collaborator_id=sample_collaborator.id, total=pen("400.00")
        )

    def test_collaborator_submits_own_payment(
        self, ledger, notifier, pay_schedule, sample_collaborator
    ):
        payment = ledger.submit_payment(
            pay_schedule[0].id, pen("200.00"), "BANK_TRANSFER", submitted_by="u-42"
        )
        ledger.approve_payment(payment.id)

        assert notifier.decisions[0].collaborator_id == sample_collaborator.id

    def test_other_submitter_rejected(self, ledger, pay_schedule):
        with pytest.raises(SubmitterMismatchError, match="'u-7'"):
            ledger.submit_payment(pay_schedule[0].id, pen("200.00"), "CASH", submitted_by="u-7")

    def test_anonymous_submitter_rejected(self, ledger, pay_schedule):
        with pytest.raises(SubmitterMismatchError):
            ledger.submit_payment(pay_schedule[0].id, pen("200.00"), "CASH")

    def test_collaborator_payments_do_not_affect_client_progress(
        self, ledger, contract_service, sample_contract, sample_schedule, pay_schedule
    ):
        payment = ledger.submit_payment(
            pay_schedule[0].id, pen("200.00"), "CASH", submitted_by="u-42"
        )
        ledger.approve_payment(payment.id)

        contract = contract_service.require_contract(sample_contract.id)
        assert payment_percentage(contract) == 0
        assert len(contract.installments) == 4
