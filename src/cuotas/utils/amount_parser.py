"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "S/ 123.45"
    - "$123.45"
    - "1,234.56"

    Negative amounts are rejected: payments and installments are always
    recorded as positive sums.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols and codes
    amount_str = re.sub(r"(?i)^(s/\.?|pen|usd|\$)", "", amount_str)
    amount_str = re.sub(r"(?i)(pen|usd)$", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "")

    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {amount_str}")
    return amount
