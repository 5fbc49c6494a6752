"""SQLAlchemy models for cuotas database.

Money columns store integer minor units (``*_cents``) next to a currency
code so sums never go through floating point.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Contract(Base):
    """Contract model."""

    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    total_cents = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    observation = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    installments = relationship(
        "Installment",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="Installment.sequence",
    )
    deliverables = relationship(
        "DeliverableAssignment",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="DeliverableAssignment.id",
    )
    collaborators = relationship(
        "Collaborator",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="Collaborator.id",
    )


class Collaborator(Base):
    """Collaborator assigned to a contract."""

    __tablename__ = "collaborators"

    id = Column(Integer, primary_key=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=False)
    user_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    assigned_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("contract_id", "user_id", name="uq_contract_user"),)

    # Relationships
    contract = relationship("Contract", back_populates="collaborators")
    installments = relationship(
        "Installment",
        back_populates="collaborator",
        order_by="Installment.sequence",
    )


class Installment(Base):
    """Installment model.

    ``collaborator_id`` is NULL for the client schedule.
    IDs are never reused, so a stale installment ID cannot land a payment
    on a regenerated schedule. Payments are not cascaded: deleting an
    installment that still has payments fails instead of dropping them.
    """

    __tablename__ = "installments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=False)
    collaborator_id = Column(Integer, ForeignKey("collaborators.id"), nullable=True)
    sequence = Column(Integer, nullable=False)
    description = Column(String, nullable=False)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    due_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    contract = relationship("Contract", back_populates="installments")
    collaborator = relationship("Collaborator", back_populates="installments")
    payments = relationship(
        "Payment",
        back_populates="installment",
        order_by="Payment.id",
    )


class Payment(Base):
    """Payment claim model."""

    __tablename__ = "payments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    installment_id = Column(Integer, ForeignKey("installments.id"), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    method = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    status = Column(String, nullable=False, default="PENDING")
    submitted_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    approved_at = Column(DateTime, nullable=True)
    decided_at = Column(DateTime, nullable=True)

    # Relationships
    installment = relationship("Installment", back_populates="payments")


class DeliverableAssignment(Base):
    """Deliverable assigned to a contract."""

    __tablename__ = "deliverable_assignments"

    id = Column(Integer, primary_key=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=False)
    name = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    is_approved = Column(Boolean, default=False, nullable=False)
    assigned_at = Column(DateTime, default=_utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    contract = relationship("Contract", back_populates="deliverables")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
