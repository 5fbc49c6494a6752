"""Installment schedule commands."""

import click
from datetime import date

from cuotas.cli.contract_resolution import resolve_contract_or_exit
from cuotas.cli.error_handling import handle_domain_error
from cuotas.cli.formatting import echo_installment_table
from cuotas.domain.contract import ContractService
from cuotas.domain.errors import DomainError
from cuotas.domain.money import Money
from cuotas.domain.schedule import DEFAULT_DESCRIPTION, ScheduleService
from cuotas.domain.views import build_ledger_view
from cuotas.utils.amount_parser import parse_amount
from cuotas.utils.date_parser import parse_date


@click.group()
def schedule_group():
    """Manage installment schedules."""
    pass


def _collaborator_total(ctx, contract_service: ContractService, contract_id: int, total: str | None):
    """Parse --total for collaborator ledgers in the contract's currency."""
    if total is None:
        return None
    contract = contract_service.require_contract(contract_id)
    try:
        return Money.of(parse_amount(total), contract.currency)
    except (DomainError, ValueError) as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _echo_created(installments) -> None:
    click.echo(f"Created {len(installments)} installment(s):")
    for installment in installments:
        click.echo(
            f"  {installment.id:<5} {installment.description:<20} "
            f"{installment.amount.format():>14}  due {installment.due_date.strftime('%d/%m/%Y')}"
        )


@schedule_group.command("generate")
@click.argument("contract", metavar="CONTRACT")
@click.option("--count", type=int, required=True, help="Number of monthly installments")
@click.option("--start-date", help="Count months from this date (default: contract start date)")
@click.option("--description", default=DEFAULT_DESCRIPTION, show_default=True, help="Installment label")
@click.option("--collaborator", type=int, help="Collaborator ID (schedules their pay instead)")
@click.option("--total", help="Amount to split; required with --collaborator")
@click.pass_context
def generate(
    ctx,
    contract: str,
    count: int,
    start_date: str | None,
    description: str,
    collaborator: int | None,
    total: str | None,
):
    """Split a total into equal monthly installments.

    The last installment absorbs any rounding remainder so the schedule
    always adds up to the total.

    Examples:
        cuotas schedule generate 1 --count 4
        cuotas schedule generate "Tesis UNMSM" --count 3 --start-date 2024-02-01
        cuotas schedule generate 1 --count 2 --collaborator 1 --total 400
    """
    db = ctx.obj["db"]
    contract_service = ContractService(db)
    service = ScheduleService(db)
    contract_id = resolve_contract_or_exit(ctx, contract_service, contract)

    try:
        start = parse_date(start_date) if start_date else None
        schedule_total = _collaborator_total(ctx, contract_service, contract_id, total)
        installments = service.create_schedule(
            contract_id,
            count,
            start_date=start,
            description=description,
            collaborator_id=collaborator,
            total=schedule_total,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    _echo_created(installments)


@schedule_group.command("single")
@click.argument("contract", metavar="CONTRACT")
@click.option("--due-date", help="Due date (default: contract end date)")
@click.option("--collaborator", type=int, help="Collaborator ID (schedules their pay instead)")
@click.option("--total", help="Amount due; required with --collaborator")
@click.pass_context
def single(ctx, contract: str, due_date: str | None, collaborator: int | None, total: str | None):
    """Schedule the whole amount as a single payment."""
    db = ctx.obj["db"]
    contract_service = ContractService(db)
    service = ScheduleService(db)
    contract_id = resolve_contract_or_exit(ctx, contract_service, contract)

    try:
        due = parse_date(due_date) if due_date else None
        schedule_total = _collaborator_total(ctx, contract_service, contract_id, total)
        installments = service.create_single_payment(
            contract_id, due_date=due, collaborator_id=collaborator, total=schedule_total
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    _echo_created(installments)


@schedule_group.command("custom")
@click.argument("contract", metavar="CONTRACT")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Installment as 'DESCRIPTION;AMOUNT;DUE_DATE' (repeatable)",
)
@click.option("--collaborator", type=int, help="Collaborator ID (schedules their pay instead)")
@click.pass_context
def custom(ctx, contract: str, lines: tuple[str, ...], collaborator: int | None):
    """Store explicitly listed installments.

    Client schedules must add up exactly to the contract total.

    Examples:
        cuotas schedule custom 1 --line "Adelanto;600;2024-02-15" --line "Saldo;600;2024-05-15"
    """
    db = ctx.obj["db"]
    contract_service = ContractService(db)
    service = ScheduleService(db)
    contract_id = resolve_contract_or_exit(ctx, contract_service, contract)
    currency = contract_service.require_contract(contract_id).currency

    parsed = []
    for line in lines:
        parts = [part.strip() for part in line.split(";")]
        if len(parts) != 3:
            click.echo(
                f"Error: Invalid line '{line}'. Expected 'DESCRIPTION;AMOUNT;DUE_DATE'",
                err=True,
            )
            ctx.exit(1)
        description, amount, due = parts
        try:
            parsed.append((description, Money.of(parse_amount(amount), currency), parse_date(due)))
        except (DomainError, ValueError) as e:
            click.echo(f"Error: Invalid line '{line}': {e}", err=True)
            ctx.exit(1)

    try:
        installments = service.create_custom_schedule(
            contract_id, parsed, collaborator_id=collaborator
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    _echo_created(installments)


@schedule_group.command("set-due-date")
@click.argument("installment_id", type=int)
@click.argument("due_date")
@click.pass_context
def set_due_date(ctx, installment_id: int, due_date: str):
    """Change the due date of an installment.

    Due dates stay editable after payments are recorded; amounts do not.
    """
    db = ctx.obj["db"]
    service = ScheduleService(db)

    try:
        new_due = parse_date(due_date)
        installment = service.update_due_date(installment_id, new_due)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Installment {installment.id} ({installment.description}) now due "
        f"{installment.due_date.strftime('%d/%m/%Y')}"
    )


@schedule_group.command("show")
@click.argument("contract", metavar="CONTRACT")
@click.option("--collaborator", type=int, help="Collaborator ID (shows their pay schedule)")
@click.option("--today", "today_str", help="Reference date for overdue checks (default: today)")
@click.pass_context
def show(ctx, contract: str, collaborator: int | None, today_str: str | None):
    """Show one ledger's installments and their status."""
    db = ctx.obj["db"]
    contract_service = ContractService(db)
    service = ScheduleService(db)
    contract_id = resolve_contract_or_exit(ctx, contract_service, contract)

    try:
        today = parse_date(today_str) if today_str else date.today()
        installments = service.list_installments(contract_id, collaborator_id=collaborator)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if service.is_locked(contract_id, collaborator):
        click.echo("Schedule has payments: only due dates can be changed.")
    echo_installment_table(build_ledger_view(installments, today), show_payments=True)


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
