"""Utility functions for milkledger."""

from milkledger.utils.date_parser import parse_date
from milkledger.utils.number_parser import parse_number, format_number

__all__ = ["parse_date", "parse_number", "format_number"]
