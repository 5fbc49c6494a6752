"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidScheduleError(ValidationError):
    """Installment schedule parameters are out of range or do not reconcile."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist in the loaded snapshot."""


class ConflictError(DomainError):
    """Domain conflict with existing state."""


class ScheduleLockedError(ConflictError):
    """Schedule cannot be regenerated because payments exist against it."""


class AlreadyDecidedError(ConflictError):
    """Payment was already verified or rejected."""


class SubmitterMismatchError(DomainError):
    """Payment submitted into a collaborator ledger by someone else."""


def contract_not_found(contract_id: int) -> str:
    """Return message for missing contract."""
    return f"Contract {contract_id} not found"


def installment_not_found(installment_id: int) -> str:
    """Return message for missing installment."""
    return f"Installment {installment_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def collaborator_not_found(collaborator_id: int) -> str:
    """Return message for missing collaborator."""
    return f"Collaborator {collaborator_id} not found"


def deliverable_not_found(deliverable_id: int) -> str:
    """Return message for missing deliverable assignment."""
    return f"Deliverable {deliverable_id} not found"


def schedule_locked(
    contract_id: int, payment_count: int, collaborator_id: Optional[int] = None
) -> str:
    """Return message when a ledger already has payment history."""
    if collaborator_id is None:
        ledger = f"client schedule on contract {contract_id}"
    else:
        ledger = f"collaborator {collaborator_id} schedule on contract {contract_id}"
    return (
        f"Cannot regenerate {ledger}: it has "
        f"{payment_count} payment{'s' if payment_count != 1 else ''}. "
        "Only due dates can be edited."
    )


def payment_already_decided(payment_id: int, status: str) -> str:
    """Return message for a payment that is no longer pending."""
    return f"Payment {payment_id} was already decided ({status})"


def schedule_does_not_reconcile(total: Decimal, scheduled: Decimal) -> str:
    """Return message when custom installments do not add up to the total."""
    difference = total - scheduled
    return (
        f"Installments add up to {scheduled:.2f} but the total is {total:.2f} "
        f"(difference {difference:.2f})"
    )


def submitter_mismatch(collaborator_id: int, submitted_by: str | None) -> str:
    """Return message for a submission by someone other than the collaborator."""
    who = f"'{submitted_by}'" if submitted_by else "an anonymous submitter"
    return (
        f"Only the assigned collaborator can submit payments to collaborator "
        f"{collaborator_id} ledger, not {who}"
    )
