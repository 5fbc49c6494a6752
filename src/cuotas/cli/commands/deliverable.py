"""Deliverable assignment commands."""

import click

from cuotas.cli.contract_resolution import resolve_contract_or_exit
from cuotas.cli.error_handling import handle_domain_error
from cuotas.domain.contract import ContractService
from cuotas.domain.errors import DomainError


@click.group()
def deliverable_group():
    """Manage contract deliverables."""
    pass


@deliverable_group.command("add")
@click.argument("contract", metavar="CONTRACT")
@click.argument("name", metavar="DELIVERABLE_NAME")
@click.option("--notes", help="Notes")
@click.pass_context
def add_deliverable(ctx, contract: str, name: str, notes: str | None):
    """Assign a deliverable to a contract."""
    db = ctx.obj["db"]
    service = ContractService(db)
    contract_id = resolve_contract_or_exit(ctx, service, contract)

    try:
        deliverable_id = service.add_deliverable(contract_id, name, notes=notes)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added deliverable '{name}' (ID: {deliverable_id})")


@deliverable_group.command("complete")
@click.argument("deliverable_id", type=int)
@click.option("--notes", help="Notes")
@click.pass_context
def complete_deliverable(ctx, deliverable_id: int, notes: str | None):
    """Mark a deliverable as completed."""
    db = ctx.obj["db"]
    service = ContractService(db)

    try:
        deliverable = service.update_deliverable(deliverable_id, is_completed=True, notes=notes)
        progress = service.progress(deliverable.contract_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Completed deliverable '{deliverable.name}'")
    click.echo(f"  Deliverables progress: {progress.deliverables_percentage}%")


@deliverable_group.command("approve")
@click.argument("deliverable_id", type=int)
@click.pass_context
def approve_deliverable(ctx, deliverable_id: int):
    """Approve a completed deliverable."""
    db = ctx.obj["db"]
    service = ContractService(db)

    try:
        deliverable = service.approve_deliverable(deliverable_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Approved deliverable '{deliverable.name}'")


def register_commands(cli):
    """Register deliverable commands with main CLI."""
    cli.add_command(deliverable_group, name="deliverable")
