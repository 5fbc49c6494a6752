"""Contract domain service."""

from __future__ import annotations

from datetime import date, datetime, UTC
from typing import TYPE_CHECKING, Optional

from cuotas.domain.entities import (
    Collaborator,
    Contract,
    ContractPaymentStatus,
    ContractProgress,
    DeliverableAssignment,
    PaymentStatistics,
    PortfolioSummary,
)
from cuotas.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    collaborator_not_found,
    contract_not_found,
    deliverable_not_found,
)
from cuotas.domain.money import Money
from cuotas.domain.progress import (
    contract_progress,
    payment_statistics,
    portfolio_summary,
)
from cuotas.domain.status import contract_payment_status

if TYPE_CHECKING:
    from cuotas.database.base import Database


class ContractService:
    """Service for managing contracts, deliverables and collaborators."""

    def __init__(self, db: Database):
        """Initialize contract service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_contract(
        self,
        name: str,
        total: Money,
        start_date: date,
        end_date: date,
        observation: Optional[str] = None,
    ) -> int:
        """Create a new contract.

        Args:
            name: Contract name
            total: Agreed total price
            start_date: Engagement start date
            end_date: Engagement end date
            observation: Optional free-text notes

        Returns:
            Contract ID

        Raises:
            ValidationError: If name is empty, total is zero or dates are inverted
        """
        if not name or not name.strip():
            raise ValidationError("Contract name cannot be empty")
        if total.is_zero():
            raise ValidationError("Contract total must be greater than zero")
        if start_date >= end_date:
            raise ValidationError("End date must be after start date")

        return self.db.create_contract(
            name=name.strip(),
            total_amount=total.amount,
            currency=total.currency.value,
            start_date=start_date,
            end_date=end_date,
            observation=observation,
        )

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        """Get contract by ID.

        Args:
            contract_id: Contract ID

        Returns:
            Hydrated contract or None if not found
        """
        return self.db.get_contract(contract_id)

    def require_contract(self, contract_id: int) -> Contract:
        """Get contract by ID or raise NotFoundError."""
        contract = self.db.get_contract(contract_id)
        if contract is None:
            raise NotFoundError(contract_not_found(contract_id))
        return contract

    def list_contracts(self) -> list[Contract]:
        """List all contracts."""
        return self.db.list_contracts()

    def progress(self, contract_id: int) -> ContractProgress:
        """Recompute progress percentages for a contract."""
        return contract_progress(self.require_contract(contract_id))

    def payment_status(self, contract_id: int) -> ContractPaymentStatus:
        """Recompute the aggregate status of the client installments."""
        return contract_payment_status(self.require_contract(contract_id))

    def portfolio(self) -> PortfolioSummary:
        """Statistics across every contract."""
        return portfolio_summary(self.db.list_contracts())

    def payment_statistics(self, today: Optional[date] = None) -> PaymentStatistics:
        """Payment dashboard figures across every contract.

        Args:
            today: Reference date for overdue detection (default: today)
        """
        return payment_statistics(self.db.list_contracts(), today or date.today())

    # Deliverables
    def add_deliverable(
        self, contract_id: int, name: str, notes: Optional[str] = None
    ) -> int:
        """Assign a deliverable to a contract.

        Returns:
            Deliverable assignment ID
        """
        self.require_contract(contract_id)
        if not name or not name.strip():
            raise ValidationError("Deliverable name cannot be empty")
        deliverable_id = self.db.create_deliverable(contract_id, name.strip(), notes)
        self.db.touch_contract(contract_id)
        return deliverable_id

    def update_deliverable(
        self,
        deliverable_id: int,
        is_completed: Optional[bool] = None,
        is_approved: Optional[bool] = None,
        notes: Optional[str] = None,
    ) -> DeliverableAssignment:
        """Update a deliverable's completion, approval and notes.

        Arguments left as None keep their current value. Reopening a
        completed deliverable also withdraws its approval.

        Raises:
            NotFoundError: If the deliverable doesn't exist
            ValidationError: If approving a deliverable that isn't completed
        """
        deliverable = self.db.get_deliverable(deliverable_id)
        if deliverable is None:
            raise NotFoundError(deliverable_not_found(deliverable_id))

        completed = deliverable.is_completed if is_completed is None else is_completed
        approved = deliverable.is_approved if is_approved is None else is_approved
        if not completed:
            if is_approved:
                raise ValidationError(
                    f"Deliverable {deliverable_id} must be completed before it can be approved"
                )
            approved = False

        completed_at = deliverable.completed_at
        if completed and not deliverable.is_completed:
            completed_at = datetime.now(UTC)
        elif not completed:
            completed_at = None

        self.db.update_deliverable(
            deliverable_id,
            is_completed=completed,
            is_approved=approved,
            notes=deliverable.notes if notes is None else notes,
            completed_at=completed_at,
        )
        self.db.touch_contract(deliverable.contract_id)
        return self.db.get_deliverable(deliverable_id)

    def complete_deliverable(self, deliverable_id: int) -> DeliverableAssignment:
        return self.update_deliverable(deliverable_id, is_completed=True)

    def approve_deliverable(self, deliverable_id: int) -> DeliverableAssignment:
        return self.update_deliverable(deliverable_id, is_approved=True)

    # Collaborators
    def assign_collaborator(self, contract_id: int, user_id: str, name: str) -> int:
        """Assign a collaborator to a contract.

        Returns:
            Collaborator ID

        Raises:
            NotFoundError: If the contract doesn't exist
            ConflictError: If the user is already assigned to the contract
        """
        contract = self.require_contract(contract_id)
        if not user_id or not user_id.strip():
            raise ValidationError("Collaborator user ID cannot be empty")
        user_id = user_id.strip()
        for collaborator in contract.collaborators:
            if collaborator.user_id == user_id:
                raise ConflictError(
                    f"User '{user_id}' is already assigned to contract {contract_id}"
                )
        collaborator_id = self.db.create_collaborator(
            contract_id, user_id, (name or user_id).strip()
        )
        self.db.touch_contract(contract_id)
        return collaborator_id

    def require_collaborator(self, collaborator_id: int) -> Collaborator:
        """Get collaborator by ID or raise NotFoundError."""
        collaborator = self.db.get_collaborator(collaborator_id)
        if collaborator is None:
            raise NotFoundError(collaborator_not_found(collaborator_id))
        return collaborator
