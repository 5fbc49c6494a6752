"""Tests for contract progress calculations."""

from datetime import date

from cuotas.domain.entities import PaymentStatus
from cuotas.domain.money import Currency, Money
from cuotas.domain.progress import (
    completed_payments_total,
    contract_progress,
    deliverables_percentage,
    outstanding_balance,
    overall_progress,
    payment_percentage,
    payment_statistics,
    portfolio_summary,
)

COMPLETED = PaymentStatus.COMPLETED
PENDING = PaymentStatus.PENDING


def test_no_deliverables_is_zero_percent(make_contract):
    assert deliverables_percentage(make_contract()) == 0


def test_deliverables_percentage_rounds(make_contract, make_deliverable):
    contract = make_contract(
        deliverables=[
            make_deliverable(is_completed=True),
            make_deliverable(is_completed=True),
            make_deliverable(),
        ]
    )
    assert deliverables_percentage(contract) == 67


def test_approval_is_not_required_for_completion(make_contract, make_deliverable):
    contract = make_contract(deliverables=[make_deliverable(is_completed=True, is_approved=False)])
    assert deliverables_percentage(contract) == 100


def test_payment_percentage_counts_only_completed(
    make_contract, make_installment, make_payment
):
    contract = make_contract(
        total="1000.00",
        installments=[
            make_installment(
                payments=[
                    make_payment(COMPLETED, amount="250.00"),
                    make_payment(PaymentStatus.PENDING, amount="500.00"),
                    make_payment(PaymentStatus.FAILED, amount="500.00"),
                ]
            )
        ],
    )
    assert payment_percentage(contract) == 25


def test_payment_percentage_capped_at_hundred(make_contract, make_installment, make_payment):
    contract = make_contract(
        total="100.00",
        installments=[make_installment(payments=[make_payment(COMPLETED, amount="150.00")])],
    )
    assert payment_percentage(contract) == 100
    assert completed_payments_total(contract) == Money.of("150.00", "PEN")


def test_payment_percentage_without_payments(make_contract):
    assert payment_percentage(make_contract()) == 0


def test_overall_progress_is_average(
    make_contract, make_installment, make_payment, make_deliverable
):
    contract = make_contract(
        total="1000.00",
        installments=[make_installment(payments=[make_payment(COMPLETED, amount="250.00")])],
        deliverables=[make_deliverable(is_completed=True), make_deliverable()],
    )
    # (50 + 25) / 2 = 37.5
    assert overall_progress(contract) == 38

    progress = contract_progress(contract)
    assert progress.deliverables_percentage == 50
    assert progress.payment_percentage == 25
    assert progress.overall_progress == 38


def test_portfolio_summary(make_contract, make_installment, make_payment, make_deliverable):
    done = make_contract(
        total="100.00",
        installments=[make_installment(payments=[make_payment(COMPLETED, amount="100.00")])],
        deliverables=[make_deliverable(is_completed=True)],
    )
    fresh = make_contract(total="300.00")
    dollars = make_contract(total="50.00", currency="USD")

    summary = portfolio_summary([done, fresh, dollars])

    assert summary.total_contracts == 3
    assert summary.completed_contracts == 1
    assert summary.active_contracts == 2
    assert summary.average_progress == 33
    assert summary.revenue_by_currency == {
        Currency.PEN: Money.of("400.00", "PEN"),
        Currency.USD: Money.of("50.00", "USD"),
    }


def test_portfolio_summary_empty():
    summary = portfolio_summary([])
    assert summary.total_contracts == 0
    assert summary.average_progress == 0
    assert summary.revenue_by_currency == {}


def test_outstanding_balance(make_contract, make_installment, make_payment):
    contract = make_contract(
        total="1000.00",
        installments=[
            make_installment(amount="500.00", payments=[make_payment(COMPLETED, amount="300.00")]),
            make_installment(amount="500.00", payments=[make_payment(PENDING, amount="500.00")]),
        ],
    )
    assert outstanding_balance(contract) == Money.of("700.00", "PEN")


def test_outstanding_balance_never_negative(make_contract, make_installment, make_payment):
    contract = make_contract(
        total="100.00",
        installments=[make_installment(payments=[make_payment(COMPLETED, amount="150.00")])],
    )
    assert outstanding_balance(contract) == Money.zero("PEN")


def test_payment_statistics(make_contract, make_installment, make_payment):
    in_installments = make_contract(
        total="1000.00",
        installments=[
            make_installment(
                amount="500.00",
                due_date=date(2024, 2, 15),
                payments=[make_payment(COMPLETED, amount="500.00")],
            ),
            make_installment(
                amount="500.00",
                sequence=2,
                due_date=date(2024, 4, 15),
                payments=[make_payment(PENDING, amount="200.00")],
            ),
        ],
    )
    up_front = make_contract(
        total="300.00",
        currency="USD",
        installments=[make_installment(amount="300.00", currency="USD", due_date=date(2024, 2, 15))],
    )
    unscheduled = make_contract(total="200.00")

    stats = payment_statistics([in_installments, up_front, unscheduled], date(2024, 3, 1))

    assert stats.total_contracts == 3
    assert stats.single_payment_contracts == 1
    assert stats.installment_contracts == 1
    assert stats.total_installments == 3
    assert stats.paid_installments == 1
    assert stats.pending_installments == 2
    assert stats.overdue_installments == 1
    assert stats.awaiting_verification == 1
    assert stats.paid_by_currency == {
        Currency.PEN: Money.of("500.00", "PEN"),
        Currency.USD: Money.zero("USD"),
    }
    assert stats.outstanding_by_currency == {
        Currency.PEN: Money.of("700.00", "PEN"),
        Currency.USD: Money.of("300.00", "USD"),
    }
    assert stats.in_verification_by_currency[Currency.PEN] == Money.of("200.00", "PEN")


def test_payment_statistics_empty():
    stats = payment_statistics([], date(2024, 3, 1))
    assert stats.total_contracts == 0
    assert stats.total_installments == 0
    assert stats.paid_by_currency == {}
