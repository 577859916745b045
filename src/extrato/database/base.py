"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from extrato.domain.entities import (
    Account,
    Category,
    ClassificationOverride,
    ClassificationSource,
    Encoding,
    ImportBatch,
    MatcherType,
    Rule,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for extrato.

    Lifecycle: construct, ``connect()``, ``initialize_schema()``, use, then
    ``disconnect()``. The handle is also a context manager doing the same.

    Write methods commit immediately unless called inside ``unit_of_work()``,
    in which case everything commits or rolls back together.
    """

    def __enter__(self) -> "Database":
        self.connect()
        self.initialize_schema()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the session and release pooled connections."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one storage transaction.

        Commits when the block exits normally, rolls back on any exception.
        Storage failures surface as PersistenceError. Nested blocks join the
        outer one.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, bank_name: Optional[str] = None, account_number: Optional[str] = None
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, tipo: TransactionType) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self, tipo: Optional[TransactionType] = None) -> list[Category]:
        """List categories, optionally filtered by type."""
        pass

    # Import batch operations
    @abstractmethod
    def create_import_batch(
        self,
        account_id: int,
        uploaded_by: str,
        file_checksum: str,
        period_month: int,
        period_year: int,
        encoding: Encoding,
    ) -> int:
        """Create a pending import batch. Returns batch ID.

        Raises:
            DuplicateImportError: If the (account, checksum, period) tuple exists
        """
        pass

    @abstractmethod
    def finalize_import_batch(self, batch_id: int, row_count: int) -> None:
        """Record the parsed row count and mark the batch completed."""
        pass

    @abstractmethod
    def get_import_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        pass

    @abstractmethod
    def find_import_batch(
        self, account_id: int, file_checksum: str, period_month: int, period_year: int
    ) -> Optional[ImportBatch]:
        """Find the batch holding a given file for an account and period."""
        pass

    @abstractmethod
    def list_import_batches(self, account_id: Optional[int] = None) -> list[ImportBatch]:
        """List import batches, newest first."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(
        self,
        account_id: int,
        batch_id: int,
        date: date,
        document_raw: str,
        document: str,
        amount: Decimal,
        currency: str,
        row_hash: str,
    ) -> Optional[int]:
        """Insert an unclassified transaction.

        Returns the new transaction ID, or None when a transaction with the
        same row hash already exists for the account.
        """
        pass

    @abstractmethod
    def transaction_exists(self, account_id: int, row_hash: str) -> bool:
        """Check if a transaction with given row hash exists for account."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        batch_id: Optional[int] = None,
        classification_source: Optional[ClassificationSource] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        rule_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions with optional filters, ordered by date then ID."""
        pass

    @abstractmethod
    def count_transactions(
        self,
        account_id: Optional[int] = None,
        batch_id: Optional[int] = None,
        classification_source: Optional[ClassificationSource] = None,
    ) -> int:
        """Count transactions with optional filters."""
        pass

    @abstractmethod
    def apply_rule_classification(
        self,
        transaction_id: int,
        category_id: int,
        tipo: TransactionType,
        rule_id: int,
        rule_version: int,
        rationale: str,
    ) -> bool:
        """Classify a transaction by rule if it is still unclassified.

        Returns False when the transaction is no longer at source NONE.
        """
        pass

    @abstractmethod
    def reset_rule_classification(self, transaction_id: int) -> bool:
        """Return a RULE-classified transaction to NONE. Returns False otherwise."""
        pass

    @abstractmethod
    def apply_override_classification(
        self, transaction_id: int, category_id: int, tipo: TransactionType, rationale: str
    ) -> None:
        """Set an override classification and clear the rule reference."""
        pass

    # Override operations
    @abstractmethod
    def create_override(
        self,
        transaction_id: int,
        previous_category_id: Optional[int],
        previous_tipo: Optional[TransactionType],
        previous_source: ClassificationSource,
        previous_override_id: Optional[int],
        new_category_id: int,
        new_tipo: TransactionType,
        actor: str,
        reason: Optional[str] = None,
    ) -> int:
        """Append an override audit record. Returns override ID.

        Raises:
            ConflictError: If another record already starts or extends the
                chain at the same point
        """
        pass

    @abstractmethod
    def get_override(self, override_id: int) -> Optional[ClassificationOverride]:
        """Get override record by ID."""
        pass

    @abstractmethod
    def list_overrides(self, transaction_id: int) -> list[ClassificationOverride]:
        """List override records for a transaction, oldest first."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(self, name: str, priority: int, active: bool, created_by: str) -> int:
        """Create a rule head at version 1. Returns rule ID."""
        pass

    @abstractmethod
    def create_rule_version(
        self,
        rule_id: int,
        version: int,
        matcher_type: MatcherType,
        pattern: str,
        category_id: int,
        tipo: TransactionType,
        created_by: str,
    ) -> None:
        """Store an immutable rule version."""
        pass

    @abstractmethod
    def update_rule(
        self,
        rule_id: int,
        priority: Optional[int] = None,
        active: Optional[bool] = None,
        current_version: Optional[int] = None,
    ) -> None:
        """Update mutable rule head fields."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int, version: Optional[int] = None) -> Optional[Rule]:
        """Get a rule at a version (defaults to its current version)."""
        pass

    @abstractmethod
    def get_rule_by_name(self, name: str) -> Optional[Rule]:
        """Get a rule at its current version by name."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = False) -> list[Rule]:
        """List rules at their current version in evaluation order.

        Order: priority descending, then creation time, then ID.
        """
        pass

    @abstractmethod
    def list_rule_versions(self, rule_id: int) -> list[Rule]:
        """List every version of a rule, oldest first."""
        pass
