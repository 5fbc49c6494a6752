"""Utility for resolving contract names to IDs."""

from cuotas.domain.contract import ContractService


def resolve_contract(contract_service: ContractService, contract: str | int) -> int:
    """Resolve contract name or ID to contract ID.

    Args:
        contract_service: ContractService instance
        contract: Contract name (str) or ID (int or string representation of int)

    Returns:
        Contract ID

    Raises:
        ValueError: If contract is not found or the name is ambiguous
    """
    # If it's already an integer, use it as ID
    if isinstance(contract, int):
        if contract_service.get_contract(contract) is None:
            raise ValueError(f"Contract ID {contract} not found")
        return contract

    # Try to parse as integer (handles string IDs like "1")
    try:
        contract_id = int(contract)
    except (ValueError, TypeError):
        contract_id = None

    if contract_id is not None:
        if contract_service.get_contract(contract_id) is None:
            raise ValueError(f"Contract ID {contract_id} not found")
        return contract_id

    # Try to find by name
    matches = [c.id for c in contract_service.list_contracts() if c.name == contract]
    if len(matches) > 1:
        raise ValueError(
            f"Contract name '{contract}' is ambiguous; use one of IDs "
            f"{', '.join(str(m) for m in matches)}"
        )
    if matches:
        return matches[0]

    raise ValueError(f"Contract '{contract}' not found")
