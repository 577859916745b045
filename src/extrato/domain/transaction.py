"""Transaction queries and explanations."""

from typing import Optional

from extrato.database.base import Database
from extrato.domain.entities import (
    ClassificationSource,
    Explanation,
    Transaction as TransactionEntity,
)
from extrato.domain.errors import NotFoundError, ValidationError, transaction_not_found
from extrato.utils.date_parser import get_period_range


class TransactionService:
    """Read access to imported transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        batch_id: Optional[int] = None,
        classification_source: Optional[ClassificationSource | str] = None,
        period_month: Optional[int] = None,
        period_year: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            account_id: Optional account filter
            batch_id: Optional batch filter
            classification_source: Optional RULE/OVERRIDE/NONE filter
            period_month: Optional month; requires period_year
            period_year: Optional year; without a month, the whole year
            limit: Maximum number of transactions
            offset: Number of transactions to skip

        Returns:
            Transactions ordered by date, then id

        Raises:
            ValidationError: If the period is invalid
        """
        if period_month is not None and period_year is None:
            raise ValidationError("A period month requires a period year")
        start_date = end_date = None
        if period_year is not None:
            if period_month is not None:
                start_date, end_date = get_period_range(period_month, period_year)
            else:
                start_date = get_period_range(1, period_year)[0]
                end_date = get_period_range(12, period_year)[1]

        source = classification_source
        if isinstance(source, str):
            try:
                source = ClassificationSource(source.strip().upper())
            except ValueError:
                raise ValidationError(
                    f"Invalid classification source '{classification_source}'. "
                    "Expected RULE, OVERRIDE or NONE"
                )
        return self.db.list_transactions(
            account_id=account_id,
            batch_id=batch_id,
            classification_source=source,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )

    def list_unclassified(self, account_id: Optional[int] = None) -> list[TransactionEntity]:
        """List transactions still waiting for a rule or an override."""
        return self.db.list_transactions(
            account_id=account_id, classification_source=ClassificationSource.NONE
        )

    def count_transactions(
        self,
        account_id: Optional[int] = None,
        batch_id: Optional[int] = None,
        classification_source: Optional[ClassificationSource] = None,
    ) -> int:
        """Count transactions with optional filters."""
        return self.db.count_transactions(
            account_id=account_id,
            batch_id=batch_id,
            classification_source=classification_source,
        )

    def explain(self, transaction_id: int) -> Explanation:
        """Gather what explains a transaction's classification.

        Rule-classified transactions resolve to the rule version recorded on
        them, not the rule's current version.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.require_transaction(transaction_id)
        rule = None
        if transaction.rule_id is not None:
            rule = self.db.get_rule(transaction.rule_id, version=transaction.rule_version)
        return Explanation(
            transaction=transaction,
            rule=rule,
            overrides=self.db.list_overrides(transaction_id),
        )
