"""Integration tests for end-to-end workflows."""

from datetime import date

from cuotas.cli.main import cli
from cuotas.domain.entities import InstallmentStatus
from cuotas.domain.money import Money
from cuotas.domain.progress import payment_percentage
from cuotas.domain.status import contract_payment_status, installment_status


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: contract → schedule → submit → verify → progress."""
    # Step 1: Create contract
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "contract",
            "create",
            "Tesis UNMSM",
            "--total",
            "1200.00",
            "--start-date",
            "2024-01-15",
            "--end-date",
            "2024-06-15",
        ],
    )
    assert result.exit_code == 0
    contract_id = None
    for line in result.output.split("\n"):
        if "ID:" in line:
            # Extract contract ID from output like "Created contract 'Tesis UNMSM' (ID: 1)"
            contract_id = line.split("ID:")[1].strip().rstrip(")")
            break

    assert contract_id is not None

    # Step 2: Split into four installments
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "schedule", "generate", contract_id, "--count", "4"],
    )
    assert result.exit_code == 0

    contract = temp_db.get_contract(int(contract_id))
    assert [i.amount for i in contract.installments] == [Money.of("300.00", "PEN")] * 4
    first = contract.installments[0]

    # Step 3: Submit and approve a payment for the first installment
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "payment",
            "submit",
            str(first.id),
            "--method",
            "BANK_TRANSFER",
            "--reference",
            "00042",
        ],
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "payment", "approve", "1"]
    )
    assert result.exit_code == 0

    # Step 4: Check derived state (fresh session, the CLI wrote through its own)
    temp_db.disconnect()
    contract = temp_db.get_contract(int(contract_id))
    assert payment_percentage(contract) == 25
    assert installment_status(contract.installments[0]) == InstallmentStatus.PAID
    assert all(
        installment_status(i) == InstallmentStatus.NO_PAYMENTS for i in contract.installments[1:]
    )
    status = contract_payment_status(contract)
    assert (status.paid_count, status.total_count, status.fully_paid) == (1, 4, False)

    # Step 5: Contract detail shows the same picture
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "contract", "show", contract_id, "--today", "2024-02-01"],
    )
    assert result.exit_code == 0
    assert "Collected: S/ 300.00" in result.output
    assert "Outstanding: S/ 900.00" in result.output
    assert "Paid installments: 1/4" in result.output
    assert "Next due: Cuota 2 de 4 (S/ 300.00) on 15/03/2024" in result.output
    assert "25%" in result.output


def test_fully_paid_contract(temp_db, contract_service, schedule_service, ledger):
    """A contract paid in full through the services reaches 100% payment progress."""
    contract_id = contract_service.create_contract(
        "Pago completo", Money.of("100.00", "USD"), date(2024, 1, 31), date(2024, 4, 30)
    )
    installments = schedule_service.create_schedule(contract_id, 3)
    assert [i.due_date for i in installments] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]

    for installment in installments:
        payment = ledger.submit_payment(installment.id, installment.amount, "CARD")
        ledger.approve_payment(payment.id)

    progress = contract_service.progress(contract_id)
    assert progress.payment_percentage == 100
    assert progress.overall_progress == 50
    assert contract_service.payment_status(contract_id).fully_paid
