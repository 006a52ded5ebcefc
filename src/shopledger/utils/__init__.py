"""Utility functions for shopledger."""

from shopledger.utils.date_parser import parse_date, parse_datetime
from shopledger.utils.amount_parser import parse_amount, parse_quantity
from shopledger.utils.line_parser import parse_line, ParsedLine

__all__ = ["parse_date", "parse_datetime", "parse_amount", "parse_quantity", "parse_line", "ParsedLine"]
