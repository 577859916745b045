"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from extrato.domain.errors import ValidationError

# Plain digits or dot-separated thousands groups, then an optional comma decimal part.
# The fraction is matched loosely so more than two places gets its own message.
_AMOUNT_RE = re.compile(r"^(?P<integer>\d{1,3}(?:\.\d{3})+|\d+)(?:,(?P<fraction>\d+))?$")
_CURRENCY_RE = re.compile(r"^R\$\s*")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MAX_DECIMAL_PLACES = 2


def parse_amount(amount_str: str) -> Decimal:
    """Parse a pt-BR amount string into a Decimal.

    Handles:
    - "1.234,56" (dot thousands separator, comma decimal separator)
    - "R$ 2.000,00" (currency prefix, any whitespace after it)
    - "(500,00)" (negative in parentheses)
    - "-500,00" and "R$ -500,00" (leading minus)

    At most two decimal places are accepted; a third would be lost when the
    amount is stored and fingerprinted in centavos.

    Args:
        amount_str: Amount string

    Returns:
        Exact Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if amount_str is None or not amount_str.strip():
        raise ValidationError("Amount is empty")

    if _CONTROL_CHARS_RE.search(amount_str):
        raise ValidationError(f"Amount contains invalid characters: {amount_str!r}")

    text = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1].strip()

    minus_count = 0
    if text.startswith("-"):
        minus_count += 1
        text = text[1:].strip()

    text = _CURRENCY_RE.sub("", text)

    if text.startswith("-"):
        minus_count += 1
        text = text[1:].strip()

    if minus_count > 1 or (minus_count and is_negative):
        raise ValidationError(f"Invalid amount format: '{amount_str.strip()}'. Conflicting signs")
    is_negative = is_negative or minus_count == 1

    match = _AMOUNT_RE.match(text)
    if match is None:
        raise ValidationError(
            f"Invalid amount format: '{amount_str.strip()}'. Expected pt-BR format (e.g. 1.234,56)"
        )

    fraction = match.group("fraction")
    if fraction and len(fraction) > MAX_DECIMAL_PLACES:
        raise ValidationError(
            f"Invalid amount format: '{amount_str.strip()}'. "
            f"At most {MAX_DECIMAL_PLACES} decimal places allowed"
        )

    standardized = match.group("integer").replace(".", "")
    if fraction:
        standardized = f"{standardized}.{fraction}"

    try:
        amount = Decimal(standardized)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str.strip()}': {e}")

    return -amount if is_negative else amount
