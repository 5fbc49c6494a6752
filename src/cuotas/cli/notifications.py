"""Notification dispatcher used by the CLI."""

import click

from cuotas.domain.entities import PaymentDecision, PaymentStatus
from cuotas.domain.notifications import PaymentNotifier
from cuotas.logging_config import get_logger

logger = get_logger("notifications")


class EchoNotifier(PaymentNotifier):
    """Reports payment decisions on the terminal and in the log."""

    def payment_decided(self, decision: PaymentDecision) -> None:
        outcome = "verified" if decision.status == PaymentStatus.COMPLETED else "rejected"
        recipient = decision.submitted_by or (
            f"collaborator {decision.collaborator_id}"
            if decision.collaborator_id is not None
            else "the client"
        )
        logger.info(
            "Payment %s on installment %s of contract %s %s",
            decision.payment_id,
            decision.installment_id,
            decision.contract_id,
            outcome,
        )
        click.echo(
            f"Notified {recipient}: payment {decision.payment_id} of "
            f"{decision.amount.format()} was {outcome}"
        )
