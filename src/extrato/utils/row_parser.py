"""CSV row parsing for pt-BR bank statements."""

import re
from typing import Sequence

from extrato.domain.entities import ParsedRow
from extrato.domain.errors import ValidationError
from extrato.utils.amount_parser import parse_amount
from extrato.utils.date_parser import parse_date

# Fixed column positions: date, document, amount. Extra columns are ignored.
DATE_COLUMN = 0
DOCUMENT_COLUMN = 1
AMOUNT_COLUMN = 2
REQUIRED_COLUMNS = 3

# Matches the width of the stored document columns.
MAX_DOCUMENT_LENGTH = 255

_WHITESPACE_RE = re.compile(r"\s+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def normalize_document(document: str) -> str:
    """Normalize a document/description field.

    Trims, collapses whitespace runs to a single space and upper-cases.
    Accented characters are kept as they are ("CAFÉ JOSÉ" stays "CAFÉ JOSÉ").

    Raises:
        ValidationError: If the text contains control characters
    """
    if _CONTROL_CHARS_RE.search(document):
        raise ValidationError(f"Document contains invalid control characters: {document!r}")
    return _WHITESPACE_RE.sub(" ", document.strip()).upper()


def parse_csv_row(cells: Sequence[str]) -> ParsedRow:
    """Parse one CSV row into a normalized transaction candidate.

    Args:
        cells: Column values in file order

    Returns:
        ParsedRow with date, raw and normalized document, and signed amount

    Raises:
        ValidationError: If a required column is missing, empty, too long or invalid
    """
    if len(cells) < REQUIRED_COLUMNS:
        raise ValidationError(
            f"Insufficient columns: expected at least {REQUIRED_COLUMNS}, got {len(cells)}"
        )

    date_str = cells[DATE_COLUMN] or ""
    document_str = cells[DOCUMENT_COLUMN] or ""
    amount_str = cells[AMOUNT_COLUMN] or ""

    if not date_str.strip():
        raise ValidationError("Date column is empty")
    if not document_str.strip():
        raise ValidationError("Document column is empty")
    if not amount_str.strip():
        raise ValidationError("Amount column is empty")
    document_raw = document_str.strip()
    document = normalize_document(document_raw)
    # Upper-casing can lengthen text ("ß" becomes "SS"), so check both forms.
    if max(len(document_raw), len(document)) > MAX_DOCUMENT_LENGTH:
        raise ValidationError(f"Document is longer than {MAX_DOCUMENT_LENGTH} characters")

    return ParsedRow(
        date=parse_date(date_str),
        document_raw=document_raw,
        document=document,
        amount=parse_amount(amount_str),
    )
