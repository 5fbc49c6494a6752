"""CLI helpers for contract resolution and error handling."""

from __future__ import annotations

import click
from cuotas.domain.contract import ContractService
from cuotas.utils.contract_resolver import resolve_contract


def resolve_contract_or_exit(
    ctx: click.Context, contract_service: ContractService, contract: str | int
) -> int:
    """Resolve contract name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_contract(contract_service, contract)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
