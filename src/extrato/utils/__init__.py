"""Utility functions for extrato."""

from extrato.utils.date_parser import parse_date, get_period_range, validate_period
from extrato.utils.amount_parser import parse_amount
from extrato.utils.row_parser import normalize_document, parse_csv_row
from extrato.utils.file_reader import compute_checksum, detect_encoding, iter_csv_rows

__all__ = [
    "parse_date",
    "get_period_range",
    "validate_period",
    "parse_amount",
    "normalize_document",
    "parse_csv_row",
    "compute_checksum",
    "detect_encoding",
    "iter_csv_rows",
]
