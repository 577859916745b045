"""Manual classification overrides and their audit trail."""

import logging
from typing import Optional

from extrato.database.base import Database
from extrato.domain.category import parse_transaction_type
from extrato.domain.entities import (
    ActorContext,
    ClassificationOverride,
    TransactionType,
)
from extrato.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


def override_rationale(override_id: int, actor: str, reason: Optional[str] = None) -> str:
    """Explain an override classification in terms of its audit record."""
    rationale = f"Override #{override_id} by {actor}"
    if reason:
        rationale += f": {reason}"
    return rationale


class OverrideService:
    """Applies manual corrections and records them.

    Every override appends a record holding the state it replaced. A
    transaction may be overridden again; each new record points at the
    previous one, so the full history can be walked from either end.
    """

    def __init__(self, db: Database):
        """Initialize override service.

        Args:
            db: Database instance
        """
        self.db = db

    def override(
        self,
        ctx: ActorContext,
        transaction_id: int,
        new_category_id: Optional[int],
        new_type: Optional[TransactionType | str],
        reason: Optional[str] = None,
    ) -> ClassificationOverride:
        """Reclassify a transaction by hand.

        Args:
            ctx: Acting user
            transaction_id: Transaction to correct
            new_category_id: Category to assign
            new_type: RECEITA or DESPESA
            reason: Optional free-text justification

        Returns:
            The stored override record

        Raises:
            ValidationError: If the category or type is missing or the type is invalid
            NotFoundError: If the transaction or category does not exist
            ConflictError: If another override of the transaction landed first
        """
        if new_category_id is None:
            raise ValidationError("New category is required")
        target_type = parse_transaction_type(new_type)
        reason = reason.strip() if reason and reason.strip() else None

        if self.db.get_category(new_category_id) is None:
            raise NotFoundError(category_not_found(new_category_id))

        with self.db.unit_of_work():
            # Snapshot and chain tail are read in the same storage transaction
            # as the write; a racing override surfaces as ConflictError.
            transaction = self.db.get_transaction(transaction_id)
            if transaction is None:
                raise NotFoundError(transaction_not_found(transaction_id))
            previous = self.db.list_overrides(transaction_id)
            override_id = self.db.create_override(
                transaction_id=transaction_id,
                previous_category_id=transaction.category_id,
                previous_tipo=transaction.tipo,
                previous_source=transaction.classification_source,
                previous_override_id=previous[-1].id if previous else None,
                new_category_id=new_category_id,
                new_tipo=target_type,
                actor=ctx.actor,
                reason=reason,
            )
            self.db.apply_override_classification(
                transaction_id,
                category_id=new_category_id,
                tipo=target_type,
                rationale=override_rationale(override_id, ctx.actor, reason),
            )

        logger.info(
            "Classification overridden",
            extra={
                "override_id": override_id,
                "transaction_id": transaction_id,
                "previous_source": transaction.classification_source.value,
                "new_category_id": new_category_id,
                "actor": ctx.actor,
            },
        )
        return self.db.get_override(override_id)

    def get_override(self, override_id: int) -> Optional[ClassificationOverride]:
        """Get override record by ID."""
        return self.db.get_override(override_id)

    def list_overrides(self, transaction_id: int) -> list[ClassificationOverride]:
        """List the override chain of a transaction, oldest first.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return self.db.list_overrides(transaction_id)

