"""Shared pytest fixtures for cuotas tests."""

import tempfile
import os
from datetime import date, datetime, UTC
import pytest

from cuotas.database.factories import create_sqlite_database
from cuotas.domain.contract import ContractService
from cuotas.domain.entities import (
    Contract,
    DeliverableAssignment,
    Installment,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from cuotas.domain.ledger import PaymentLedger
from cuotas.domain.money import Money
from cuotas.domain.notifications import PaymentNotifier
from cuotas.domain.schedule import ScheduleService
from cuotas.logging_config import reset_logging


class RecordingNotifier(PaymentNotifier):
    """Notifier that keeps every decision it receives."""

    def __init__(self):
        self.decisions = []

    def payment_decided(self, decision):
        self.decisions.append(decision)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def contract_service(temp_db):
    """Create a ContractService with a temporary database."""
    return ContractService(temp_db)


@pytest.fixture
def schedule_service(temp_db):
    """Create a ScheduleService with a temporary database."""
    return ScheduleService(temp_db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def ledger(temp_db, notifier):
    """Create a PaymentLedger that records notifications."""
    return PaymentLedger(temp_db, notifier=notifier)


@pytest.fixture
def sample_contract(contract_service):
    """Create a 1200.00 PEN contract running January to June 2024."""
    contract_id = contract_service.create_contract(
        name="Tesis UNMSM",
        total=Money.of("1200.00", "PEN"),
        start_date=date(2024, 1, 15),
        end_date=date(2024, 6, 15),
    )
    return contract_service.require_contract(contract_id)


@pytest.fixture
def sample_schedule(schedule_service, sample_contract):
    """Split the sample contract into four monthly installments."""
    return schedule_service.create_schedule(sample_contract.id, 4)


@pytest.fixture
def sample_collaborator(contract_service, sample_contract):
    """Assign a collaborator to the sample contract."""
    collaborator_id = contract_service.assign_collaborator(
        sample_contract.id, "u-42", "Ana Torres"
    )
    return contract_service.require_collaborator(collaborator_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


# In-memory entity builders for the pure domain functions


@pytest.fixture
def make_payment():
    counter = iter(range(1, 10_000))

    def _make(status=PaymentStatus.PENDING, amount="100.00", currency="PEN", installment_id=1):
        return Payment(
            id=next(counter),
            installment_id=installment_id,
            amount=Money.of(amount, currency),
            method=PaymentMethod.BANK_TRANSFER,
            status=status,
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def make_installment():
    counter = iter(range(1, 10_000))

    def _make(
        payments=(),
        amount="100.00",
        currency="PEN",
        due_date=date(2024, 2, 15),
        sequence=1,
        collaborator_id=None,
    ):
        return Installment(
            id=next(counter),
            contract_id=1,
            sequence=sequence,
            description=f"Cuota {sequence}",
            amount=Money.of(amount, currency),
            due_date=due_date,
            collaborator_id=collaborator_id,
            payments=tuple(payments),
        )

    return _make


@pytest.fixture
def make_deliverable():
    counter = iter(range(1, 10_000))

    def _make(is_completed=False, is_approved=False):
        return DeliverableAssignment(
            id=next(counter),
            contract_id=1,
            name="Capítulo",
            is_completed=is_completed,
            is_approved=is_approved,
            assigned_at=datetime(2024, 1, 1, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def make_contract():
    counter = iter(range(1, 10_000))

    def _make(total="1000.00", currency="PEN", installments=(), deliverables=(), collaborators=()):
        now = datetime(2024, 1, 1, tzinfo=UTC)
        return Contract(
            id=next(counter),
            name="Contrato",
            total=Money.of(total, currency),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            created_at=now,
            updated_at=now,
            installments=tuple(installments),
            deliverables=tuple(deliverables),
            collaborators=tuple(collaborators),
        )

    return _make
