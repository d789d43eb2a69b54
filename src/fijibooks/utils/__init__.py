"""Utility functions for fijibooks."""

from fijibooks.utils.date_parser import parse_date
from fijibooks.utils.amount_parser import parse_amount, parse_amount_or_zero

__all__ = ["parse_date", "parse_amount", "parse_amount_or_zero"]
