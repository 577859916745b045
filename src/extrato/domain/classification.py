"""Rule matching engine."""

import logging
from typing import Optional

from extrato.database.base import Database
from extrato.domain.entities import (
    ActorContext,
    ClassificationRun,
    ClassificationSource,
    RuleMatch,
    Transaction,
)
from extrato.domain.errors import (
    NotFoundError,
    ValidationError,
    rule_not_found,
    transaction_not_found,
)
from extrato.domain.matcher import RuleMatcher

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


class ClassificationService:
    """Assigns categories to unclassified transactions using active rules.

    Only transactions at source NONE are evaluated, and every write is
    conditioned on the row still being NONE, so runs are repeatable and never
    overwrite an override that landed in the meantime.
    """

    def __init__(self, db: Database, page_size: int = DEFAULT_PAGE_SIZE):
        """Initialize classification service.

        Args:
            db: Database instance
            page_size: Number of transactions evaluated per unit of work
        """
        self.db = db
        self.page_size = page_size

    def load_matcher(self) -> RuleMatcher:
        """Compile the current version of every active rule in evaluation order.

        Raises:
            ValidationError: If a stored pattern no longer compiles
        """
        return RuleMatcher(self.db.list_rules(active_only=True))

    def match(self, document: str, matcher: Optional[RuleMatcher] = None) -> Optional[RuleMatch]:
        """Preview which rule would classify a document, without writing."""
        matcher = matcher or self.load_matcher()
        return matcher.find_first_match(document)

    def _apply(self, transaction: Transaction, match: RuleMatch) -> bool:
        rule = match.rule
        return self.db.apply_rule_classification(
            transaction_id=transaction.id,
            category_id=rule.category_id,
            tipo=rule.tipo,
            rule_id=rule.id,
            rule_version=rule.version,
            rationale=match.rationale,
        )

    def classify_pending(
        self, ctx: ActorContext, account_id: Optional[int] = None
    ) -> ClassificationRun:
        """Run every active rule over transactions still at source NONE.

        Args:
            ctx: Acting user or job identity
            account_id: Optional account to restrict the run to

        Returns:
            ClassificationRun counters
        """
        matcher = self.load_matcher()
        evaluated = classified = unmatched = conflicts = 0

        if len(matcher) == 0:
            logger.info("No active rules; nothing to classify", extra={"actor": ctx.actor})
            return ClassificationRun()

        while True:
            # Classified rows drop out of the NONE set, so only rows left
            # unmatched advance the offset.
            page = self.db.list_transactions(
                account_id=account_id,
                classification_source=ClassificationSource.NONE,
                limit=self.page_size,
                offset=unmatched,
            )
            if not page:
                break

            with self.db.unit_of_work():
                for transaction in page:
                    evaluated += 1
                    match = matcher.find_first_match(transaction.document)
                    if match is None:
                        unmatched += 1
                        continue
                    if self._apply(transaction, match):
                        classified += 1
                    else:
                        conflicts += 1

            if len(page) < self.page_size:
                break

        run = ClassificationRun(
            evaluated=evaluated, classified=classified, unmatched=unmatched, conflicts=conflicts
        )
        logger.info(
            "Classification run finished",
            extra={
                "actor": ctx.actor,
                "account_id": account_id,
                "evaluated": run.evaluated,
                "classified": run.classified,
                "unmatched": run.unmatched,
                "conflicts": run.conflicts,
            },
        )
        return run

    def classify_transaction(self, ctx: ActorContext, transaction_id: int) -> Optional[RuleMatch]:
        """Classify a single transaction on demand.

        Transactions that are already classified are left alone.

        Returns:
            The applied match, or None when nothing was applied

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if transaction.classification_source is not ClassificationSource.NONE:
            return None

        match = self.match(transaction.document)
        if match is None or not self._apply(transaction, match):
            return None
        logger.info(
            "Transaction classified",
            extra={
                "transaction_id": transaction_id,
                "rule_id": match.rule.id,
                "rule_version": match.rule.version,
                "actor": ctx.actor,
            },
        )
        return match

    def reset_classification(self, ctx: ActorContext, transaction_id: int) -> Transaction:
        """Return a rule-classified transaction to NONE so it is evaluated again.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the transaction carries a manual override
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if transaction.classification_source is ClassificationSource.OVERRIDE:
            raise ValidationError(
                f"Transaction {transaction_id} has a manual override; "
                "correct it with another override instead"
            )
        if self.db.reset_rule_classification(transaction_id):
            logger.info(
                "Classification reset",
                extra={"transaction_id": transaction_id, "actor": ctx.actor},
            )
        return self.db.get_transaction(transaction_id)

    def reset_rule(self, ctx: ActorContext, rule_id: int) -> int:
        """Reset every transaction classified by any version of a rule.

        Returns:
            Number of transactions returned to NONE

        Raises:
            NotFoundError: If the rule does not exist
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))

        transactions = self.db.list_transactions(
            rule_id=rule_id, classification_source=ClassificationSource.RULE
        )
        reset = 0
        with self.db.unit_of_work():
            for transaction in transactions:
                if self.db.reset_rule_classification(transaction.id):
                    reset += 1
        logger.info(
            "Rule classifications reset",
            extra={"rule_id": rule_id, "reset": reset, "actor": ctx.actor},
        )
        return reset
