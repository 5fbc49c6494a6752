"""Contract management commands."""

import click
from datetime import date

from cuotas.cli.contract_resolution import resolve_contract_or_exit
from cuotas.cli.error_handling import handle_domain_error
from cuotas.cli.formatting import echo_installment_table, progress_bar
from cuotas.domain.contract import ContractService
from cuotas.domain.errors import DomainError
from cuotas.domain.money import Currency, Money
from cuotas.domain.progress import overall_progress
from cuotas.domain.status import collaborator_payment_status
from cuotas.domain.views import build_contract_overview
from cuotas.utils.amount_parser import parse_amount
from cuotas.utils.date_parser import parse_date


@click.group()
def contract_group():
    """Manage contracts."""
    pass


@contract_group.command("create")
@click.argument("name", metavar="CONTRACT_NAME")
@click.option("--total", required=True, help="Total contract price (e.g., 1200.00)")
@click.option(
    "--currency",
    type=click.Choice([c.value for c in Currency], case_sensitive=False),
    default=Currency.PEN.value,
    show_default=True,
    help="Contract currency",
)
@click.option("--start-date", required=True, help="Start date (YYYY-MM-DD or dd/mm/yyyy)")
@click.option("--end-date", required=True, help="End date (YYYY-MM-DD or dd/mm/yyyy)")
@click.option("--observation", help="Free-text notes")
@click.pass_context
def create_contract(
    ctx,
    name: str,
    total: str,
    currency: str,
    start_date: str,
    end_date: str,
    observation: str | None,
):
    """Create a new contract.

    Examples:
        cuotas contract create "Tesis UNMSM" --total 1200.00 --start-date 2024-01-15 --end-date 2024-06-15
        cuotas contract create "Asesoría" --total 500 --currency USD --start-date today --end-date "next year"
    """
    db = ctx.obj["db"]
    service = ContractService(db)

    try:
        start = parse_date(start_date)
        end = parse_date(end_date)
        money = Money.of(parse_amount(total), currency)
        contract_id = service.create_contract(
            name=name,
            total=money,
            start_date=start,
            end_date=end,
            observation=observation,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created contract '{name}' (ID: {contract_id})")
    click.echo(f"  Total: {money.format()}")
    click.echo(f"  From {start} to {end}")


@contract_group.command("list")
@click.pass_context
def list_contracts(ctx):
    """List all contracts with their overall progress."""
    db = ctx.obj["db"]
    service = ContractService(db)

    contracts = service.list_contracts()
    if not contracts:
        click.echo("No contracts found.")
        return

    click.echo("\nContracts:")
    click.echo("-" * 80)
    for contract in contracts:
        click.echo(
            f"ID: {contract.id:3d} | {contract.name[:28]:28s} | "
            f"{contract.total.format():>14} | {overall_progress(contract):3d}%"
        )


@contract_group.command("show")
@click.argument("contract", metavar="CONTRACT")
@click.option("--today", "today_str", help="Reference date for overdue checks (default: today)")
@click.pass_context
def show_contract(ctx, contract: str, today_str: str | None):
    """Show a contract with installments, payments, deliverables and collaborators.

    CONTRACT can be a contract name or ID.
    """
    db = ctx.obj["db"]
    service = ContractService(db)
    contract_id = resolve_contract_or_exit(ctx, service, contract)

    try:
        today = parse_date(today_str) if today_str else date.today()
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    overview = build_contract_overview(service.require_contract(contract_id), today)
    contract_obj = overview.contract

    click.echo(f"\nContract {contract_obj.id}: {contract_obj.name}")
    click.echo(f"  Total: {contract_obj.total.format()}")
    click.echo(f"  Period: {contract_obj.start_date} to {contract_obj.end_date}")
    if contract_obj.observation:
        click.echo(f"  Observation: {contract_obj.observation}")
    click.echo(f"  Collected: {overview.completed_payments.format()}")
    click.echo(f"  Outstanding: {overview.outstanding.format()}")
    if overview.awaiting_verification:
        click.echo(f"  Awaiting verification: {overview.awaiting_verification} installment(s)")
    _echo_progress(overview.progress)

    click.echo("\nInstallments:")
    echo_installment_table(overview.client_ledger, show_payments=True)

    click.echo("\nDeliverables:")
    if not contract_obj.deliverables:
        click.echo("No deliverables assigned.")
    for deliverable in contract_obj.deliverables:
        state = "approved" if deliverable.is_approved else (
            "completed" if deliverable.is_completed else "pending"
        )
        click.echo(f"  {deliverable.id:<4} {deliverable.name:<40} {state}")

    if contract_obj.collaborators:
        click.echo("\nCollaborators:")
        for collaborator in contract_obj.collaborators:
            status = collaborator_payment_status(collaborator)
            click.echo(
                f"  {collaborator.id:<4} {collaborator.name:<30} ({collaborator.user_id}) "
                f"paid {status.paid_count}/{status.total_count}"
            )


@contract_group.command("progress")
@click.argument("contract", metavar="CONTRACT")
@click.pass_context
def contract_progress(ctx, contract: str):
    """Show deliverables, payment and overall progress for a contract."""
    db = ctx.obj["db"]
    service = ContractService(db)
    contract_id = resolve_contract_or_exit(ctx, service, contract)

    _echo_progress(service.progress(contract_id))


@contract_group.command("stats")
@click.option("--today", "today_str", help="Reference date for overdue checks (default: today)")
@click.pass_context
def contract_stats(ctx, today_str: str | None):
    """Show progress and payment statistics across all contracts."""
    db = ctx.obj["db"]
    service = ContractService(db)

    try:
        today = parse_date(today_str) if today_str else date.today()
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    summary = service.portfolio()
    click.echo(f"Total contracts: {summary.total_contracts}")
    click.echo(f"Active: {summary.active_contracts}")
    click.echo(f"Completed: {summary.completed_contracts}")
    click.echo(f"Average progress: {summary.average_progress}%")
    for currency, revenue in sorted(
        summary.revenue_by_currency.items(), key=lambda item: item[0].value
    ):
        click.echo(f"Revenue ({currency.value}): {revenue.format()}")

    stats = service.payment_statistics(today)
    click.echo("\nPayments:")
    click.echo(
        f"  Paid up front: {stats.single_payment_contracts} | "
        f"In installments: {stats.installment_contracts}"
    )
    click.echo(
        f"  Installments: {stats.total_installments} "
        f"(paid {stats.paid_installments}, pending {stats.pending_installments}, "
        f"overdue {stats.overdue_installments})"
    )
    click.echo(f"  Awaiting verification: {stats.awaiting_verification}")
    for currency in sorted(stats.outstanding_by_currency, key=lambda c: c.value):
        click.echo(
            f"  {currency.value}: paid {stats.paid_by_currency[currency].format()}, "
            f"outstanding {stats.outstanding_by_currency[currency].format()}, "
            f"in verification {stats.in_verification_by_currency[currency].format()}"
        )


def _echo_progress(progress) -> None:
    click.echo(f"  Deliverables: {progress_bar(progress.deliverables_percentage)}")
    click.echo(f"  Payments:     {progress_bar(progress.payment_percentage)}")
    click.echo(f"  Overall:      {progress_bar(progress.overall_progress)}")


def register_commands(cli):
    """Register contract commands with main CLI."""
    cli.add_command(contract_group, name="contract")
