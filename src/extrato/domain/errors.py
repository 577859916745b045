"""Shared domain error messages and error types."""

from datetime import datetime
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DuplicateImportError(ConflictError):
    """A batch with the same account, checksum and period already exists."""

    def __init__(
        self,
        message: str,
        batch_id: Optional[int] = None,
        uploaded_at: Optional[datetime] = None,
    ):
        super().__init__(message)
        self.batch_id = batch_id
        self.uploaded_at = uploaded_at


class PersistenceError(DomainError):
    """Storage failure. The enclosing unit of work was rolled back; safe to retry."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def rule_not_found(rule_id: int, version: Optional[int] = None) -> str:
    """Return message for missing rule or rule version."""
    if version is None:
        return f"Rule {rule_id} not found"
    return f"Rule {rule_id} version {version} not found"


def batch_not_found(batch_id: int) -> str:
    """Return message for missing import batch."""
    return f"Import batch {batch_id} not found"


def duplicate_import(
    batch_id: int, account_id: int, period_month: int, period_year: int
) -> str:
    """Return message for a file already imported for the same account/period."""
    return (
        f"File already imported for account {account_id} and period "
        f"{period_month:02d}/{period_year} (batch {batch_id})"
    )


def row_error(row_num: int, error: Exception | str) -> str:
    """Return message locating a parse failure in the source file."""
    return f"Row {row_num}: {error}"
