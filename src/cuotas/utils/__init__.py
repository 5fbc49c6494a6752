"""Utility functions for cuotas."""

from cuotas.utils.date_parser import parse_date, add_months
from cuotas.utils.amount_parser import parse_amount

__all__ = ["parse_date", "add_months", "parse_amount"]
