"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the minor-unit money
columns and the split of a contract's installments into the client ledger
and each collaborator's ledger.
"""

from cuotas.domain import entities as domain
from cuotas.domain.money import Money
from cuotas.database.models import (
    Contract as ORMContract,
    Collaborator as ORMCollaborator,
    Installment as ORMInstallment,
    Payment as ORMPayment,
    DeliverableAssignment as ORMDeliverableAssignment,
)


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        installment_id=orm_payment.installment_id,
        amount=Money.from_minor_units(orm_payment.amount_cents, orm_payment.currency),
        method=domain.PaymentMethod(orm_payment.method),
        status=domain.PaymentStatus(orm_payment.status),
        created_at=orm_payment.created_at,
        reference=orm_payment.reference,
        submitted_by=orm_payment.submitted_by,
        approved_at=orm_payment.approved_at,
        decided_at=orm_payment.decided_at,
    )


def installment_to_domain(orm_installment: ORMInstallment) -> domain.Installment:
    """Convert SQLAlchemy Installment model (with payments) to domain Installment."""
    return domain.Installment(
        id=orm_installment.id,
        contract_id=orm_installment.contract_id,
        sequence=orm_installment.sequence,
        description=orm_installment.description,
        amount=Money.from_minor_units(orm_installment.amount_cents, orm_installment.currency),
        due_date=orm_installment.due_date,
        collaborator_id=orm_installment.collaborator_id,
        payments=tuple(payment_to_domain(p) for p in orm_installment.payments),
        created_at=orm_installment.created_at,
        updated_at=orm_installment.updated_at,
    )


def deliverable_to_domain(
    orm_deliverable: ORMDeliverableAssignment,
) -> domain.DeliverableAssignment:
    """Convert SQLAlchemy DeliverableAssignment model to domain entity."""
    return domain.DeliverableAssignment(
        id=orm_deliverable.id,
        contract_id=orm_deliverable.contract_id,
        name=orm_deliverable.name,
        is_completed=orm_deliverable.is_completed,
        is_approved=orm_deliverable.is_approved,
        assigned_at=orm_deliverable.assigned_at,
        notes=orm_deliverable.notes,
        completed_at=orm_deliverable.completed_at,
    )


def collaborator_to_domain(orm_collaborator: ORMCollaborator) -> domain.Collaborator:
    """Convert SQLAlchemy Collaborator model (with pay schedule) to domain entity."""
    return domain.Collaborator(
        id=orm_collaborator.id,
        contract_id=orm_collaborator.contract_id,
        user_id=orm_collaborator.user_id,
        name=orm_collaborator.name,
        assigned_at=orm_collaborator.assigned_at,
        installments=tuple(installment_to_domain(i) for i in orm_collaborator.installments),
    )


def contract_to_domain(orm_contract: ORMContract) -> domain.Contract:
    """Convert SQLAlchemy Contract model to a fully hydrated domain Contract."""
    return domain.Contract(
        id=orm_contract.id,
        name=orm_contract.name,
        total=Money.from_minor_units(orm_contract.total_cents, orm_contract.currency),
        start_date=orm_contract.start_date,
        end_date=orm_contract.end_date,
        created_at=orm_contract.created_at,
        updated_at=orm_contract.updated_at,
        observation=orm_contract.observation,
        installments=tuple(
            installment_to_domain(i)
            for i in orm_contract.installments
            if i.collaborator_id is None
        ),
        deliverables=tuple(deliverable_to_domain(d) for d in orm_contract.deliverables),
        collaborators=tuple(collaborator_to_domain(c) for c in orm_contract.collaborators),
    )
