"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from cuotas.domain.entities import (
    Collaborator,
    Contract,
    DeliverableAssignment,
    Installment,
    Payment,
    PaymentStatus,
    ScheduledInstallment,
)


class Database(ABC):
    """Abstract database interface for cuotas.

    Reads return fully hydrated domain entities; the domain never issues its
    own queries beyond ``get_*``/``list_*`` calls on this interface.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Contract operations
    @abstractmethod
    def create_contract(
        self,
        name: str,
        total_amount: Decimal,
        currency: str,
        start_date: date,
        end_date: date,
        observation: Optional[str] = None,
    ) -> int:
        """Create a contract. Returns contract ID."""
        pass

    @abstractmethod
    def get_contract(self, contract_id: int) -> Optional[Contract]:
        """Load a contract with installments, payments, deliverables and collaborators."""
        pass

    @abstractmethod
    def list_contracts(self) -> list[Contract]:
        """List all contracts, hydrated."""
        pass

    @abstractmethod
    def touch_contract(self, contract_id: int) -> None:
        """Bump the contract's updated_at so cached aggregates are invalidated."""
        pass

    # Installment operations
    @abstractmethod
    def replace_installments(
        self,
        contract_id: int,
        installments: Sequence[ScheduledInstallment],
        collaborator_id: Optional[int] = None,
    ) -> list[int]:
        """Replace one ledger's installments in a single transaction.

        The ledger is the client schedule when ``collaborator_id`` is None,
        otherwise that collaborator's pay schedule. Returns the new IDs in
        sequence order. New IDs never reuse those of replaced installments.

        Raises:
            ScheduleLockedError: If any payment exists against the ledger.
                Checked in the same transaction as the delete; payments are
                never removed.
        """
        pass

    @abstractmethod
    def get_installment(self, installment_id: int) -> Optional[Installment]:
        """Get installment by ID, with its payments."""
        pass

    @abstractmethod
    def list_installments(
        self, contract_id: int, collaborator_id: Optional[int] = None
    ) -> list[Installment]:
        """List one ledger's installments ordered by sequence."""
        pass

    @abstractmethod
    def update_installment_due_date(self, installment_id: int, due_date: date) -> None:
        """Replace an installment's due date."""
        pass

    @abstractmethod
    def count_ledger_payments(
        self, contract_id: int, collaborator_id: Optional[int] = None
    ) -> int:
        """Count payments of any status recorded against one ledger."""
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        installment_id: int,
        amount: Decimal,
        currency: str,
        method: str,
        reference: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> int:
        """Record a PENDING payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def list_payments(
        self,
        status: Optional[PaymentStatus] = None,
        contract_id: Optional[int] = None,
    ) -> list[Payment]:
        """List payments, optionally filtered by status and contract."""
        pass

    @abstractmethod
    def decide_payment(
        self, payment_id: int, status: PaymentStatus, decided_at: datetime
    ) -> bool:
        """Move a PENDING payment to a terminal status.

        Implemented as a conditional update. Returns False when the payment
        was no longer PENDING, so concurrent deciders cannot both win.
        """
        pass

    # Deliverable operations
    @abstractmethod
    def create_deliverable(
        self, contract_id: int, name: str, notes: Optional[str] = None
    ) -> int:
        """Assign a deliverable to a contract. Returns assignment ID."""
        pass

    @abstractmethod
    def get_deliverable(self, deliverable_id: int) -> Optional[DeliverableAssignment]:
        """Get deliverable assignment by ID."""
        pass

    @abstractmethod
    def update_deliverable(
        self,
        deliverable_id: int,
        is_completed: bool,
        is_approved: bool,
        notes: Optional[str],
        completed_at: Optional[datetime],
    ) -> None:
        """Overwrite a deliverable assignment's workflow fields."""
        pass

    # Collaborator operations
    @abstractmethod
    def create_collaborator(self, contract_id: int, user_id: str, name: str) -> int:
        """Assign a collaborator to a contract. Returns collaborator ID."""
        pass

    @abstractmethod
    def get_collaborator(self, collaborator_id: int) -> Optional[Collaborator]:
        """Get collaborator by ID, with installments and payments."""
        pass
