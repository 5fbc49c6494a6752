"""Collaborator assignment and pay portal commands."""

import click
from datetime import date

from cuotas.cli.contract_resolution import resolve_contract_or_exit
from cuotas.cli.error_handling import handle_domain_error
from cuotas.cli.formatting import echo_installment_table
from cuotas.domain.contract import ContractService
from cuotas.domain.errors import DomainError
from cuotas.domain.views import build_collaborator_overview
from cuotas.utils.date_parser import parse_date


@click.group()
def collaborator_group():
    """Manage contract collaborators and their pay."""
    pass


@collaborator_group.command("assign")
@click.argument("contract", metavar="CONTRACT")
@click.argument("user_id", metavar="USER_ID")
@click.option("--name", help="Display name (defaults to USER_ID)")
@click.pass_context
def assign_collaborator(ctx, contract: str, user_id: str, name: str | None):
    """Assign a collaborator to a contract.

    Examples:
        cuotas collaborator assign 1 u-42 --name "Ana Torres"
    """
    db = ctx.obj["db"]
    service = ContractService(db)
    contract_id = resolve_contract_or_exit(ctx, service, contract)

    try:
        collaborator_id = service.assign_collaborator(contract_id, user_id, name or user_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Assigned '{name or user_id}' to contract {contract_id} (ID: {collaborator_id})")


@collaborator_group.command("show")
@click.argument("collaborator_id", type=int)
@click.option("--today", "today_str", help="Reference date for overdue checks (default: today)")
@click.pass_context
def show_collaborator(ctx, collaborator_id: int, today_str: str | None):
    """Show a collaborator's pay schedule."""
    db = ctx.obj["db"]
    service = ContractService(db)

    try:
        today = parse_date(today_str) if today_str else date.today()
        collaborator = service.require_collaborator(collaborator_id)
        contract = service.require_contract(collaborator.contract_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    overview = build_collaborator_overview(contract, collaborator, today)
    click.echo(f"\n{collaborator.name} ({collaborator.user_id}) on '{contract.name}'")
    echo_installment_table(overview.ledger, show_payments=True)


def register_commands(cli):
    """Register collaborator commands with main CLI."""
    cli.add_command(collaborator_group, name="collaborator")
