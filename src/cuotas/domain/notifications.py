"""Notification dispatcher interface for payment decisions."""

from abc import ABC, abstractmethod

from cuotas.domain.entities import PaymentDecision


class PaymentNotifier(ABC):
    """Receives every payment verification outcome.

    Implementations deliver messages to the company or collaborator that
    submitted the payment. Delivery is fire-and-forget from the ledger's
    point of view.
    """

    @abstractmethod
    def payment_decided(self, decision: PaymentDecision) -> None:
        """Handle a payment that moved to COMPLETED or FAILED."""
        pass


class NullNotifier(PaymentNotifier):
    """Notifier that drops every decision."""

    def payment_decided(self, decision: PaymentDecision) -> None:
        pass
