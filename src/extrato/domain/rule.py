"""Classification rule authoring and versioning."""

import logging
from typing import Optional

from extrato.database.base import Database
from extrato.domain.category import parse_transaction_type
from extrato.domain.entities import ActorContext, MatcherType, Rule, TransactionType
from extrato.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    rule_not_found,
)
from extrato.domain.matcher import validate_pattern

logger = logging.getLogger(__name__)


class RuleService:
    """Service for creating, versioning and (de)activating rules.

    Changing how a rule matches (matcher type, pattern, target category or
    type) writes a new immutable version; transactions keep pointing at the
    version that classified them. Priority and the active flag live on the
    rule itself and change in place.
    """

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_category(self, category_id: int) -> None:
        if category_id is None:
            raise ValidationError("Target category is required")
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def create_rule(
        self,
        ctx: ActorContext,
        name: str,
        matcher_type: MatcherType | str,
        pattern: str,
        category_id: int,
        tipo: TransactionType | str,
        priority: int = 0,
        active: bool = True,
    ) -> Rule:
        """Create a rule at version 1.

        Args:
            ctx: Acting user
            name: Unique rule name
            matcher_type: CONTAINS or REGEX
            pattern: Substring or regular expression
            category_id: Target category ID
            tipo: Target transaction type
            priority: Higher priorities are evaluated first
            active: Whether the rule takes part in classification

        Returns:
            The created rule

        Raises:
            ValidationError: If name, pattern or type is invalid
            NotFoundError: If the category does not exist
            ConflictError: If the name is taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Rule name cannot be empty")
        pattern = validate_pattern(matcher_type, pattern)
        kind = MatcherType(matcher_type)
        target_type = parse_transaction_type(tipo)
        self._require_category(category_id)

        if self.db.get_rule_by_name(name) is not None:
            raise ConflictError(f"Rule with name '{name}' already exists")

        with self.db.unit_of_work():
            rule_id = self.db.create_rule(
                name=name, priority=priority, active=active, created_by=ctx.actor
            )
            self.db.create_rule_version(
                rule_id=rule_id,
                version=1,
                matcher_type=kind,
                pattern=pattern,
                category_id=category_id,
                tipo=target_type,
                created_by=ctx.actor,
            )

        logger.info(
            "Rule created",
            extra={"rule_id": rule_id, "rule_name": name, "actor": ctx.actor},
        )
        return self.require_rule(rule_id)

    def update_rule(
        self,
        ctx: ActorContext,
        rule_id: int,
        matcher_type: Optional[MatcherType | str] = None,
        pattern: Optional[str] = None,
        category_id: Optional[int] = None,
        tipo: Optional[TransactionType | str] = None,
        priority: Optional[int] = None,
    ) -> Rule:
        """Edit a rule.

        Matching changes produce version N+1; a priority-only change does not.

        Returns:
            The rule at its (possibly new) current version

        Raises:
            NotFoundError: If the rule or category does not exist
            ValidationError: If the new pattern or type is invalid
        """
        current = self.require_rule(rule_id)

        new_kind = MatcherType(matcher_type) if matcher_type is not None else current.matcher_type
        new_pattern = pattern if pattern is not None else current.pattern
        new_pattern = validate_pattern(new_kind, new_pattern)
        new_category_id = category_id if category_id is not None else current.category_id
        new_type = parse_transaction_type(tipo) if tipo is not None else current.tipo

        matching_changed = (
            new_kind != current.matcher_type
            or new_pattern != current.pattern
            or new_category_id != current.category_id
            or new_type != current.tipo
        )
        priority_changed = priority is not None and priority != current.priority

        if not matching_changed and not priority_changed:
            return current

        if new_category_id != current.category_id:
            self._require_category(new_category_id)

        with self.db.unit_of_work():
            new_version = None
            if matching_changed:
                new_version = current.version + 1
                self.db.create_rule_version(
                    rule_id=rule_id,
                    version=new_version,
                    matcher_type=new_kind,
                    pattern=new_pattern,
                    category_id=new_category_id,
                    tipo=new_type,
                    created_by=ctx.actor,
                )
            self.db.update_rule(
                rule_id,
                priority=priority if priority_changed else None,
                current_version=new_version,
            )

        logger.info(
            "Rule updated",
            extra={
                "rule_id": rule_id,
                "new_version": new_version,
                "priority": priority,
                "actor": ctx.actor,
            },
        )
        return self.require_rule(rule_id)

    def activate_rule(self, ctx: ActorContext, rule_id: int) -> Rule:
        """Activate a rule, re-validating its current pattern first.

        Raises:
            NotFoundError: If the rule does not exist
            ValidationError: If the pattern is malformed
        """
        rule = self.require_rule(rule_id)
        try:
            validate_pattern(rule.matcher_type, rule.pattern)
        except ValidationError as e:
            raise ValidationError(f"Cannot activate rule {rule_id}: {e}") from e
        if not rule.active:
            self.db.update_rule(rule_id, active=True)
            logger.info("Rule activated", extra={"rule_id": rule_id, "actor": ctx.actor})
        return self.require_rule(rule_id)

    def deactivate_rule(self, ctx: ActorContext, rule_id: int) -> Rule:
        """Deactivate a rule. Existing classifications are left untouched.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = self.require_rule(rule_id)
        if rule.active:
            self.db.update_rule(rule_id, active=False)
            logger.info("Rule deactivated", extra={"rule_id": rule_id, "actor": ctx.actor})
        return self.require_rule(rule_id)

    def get_rule(self, rule_id: int, version: Optional[int] = None) -> Optional[Rule]:
        """Get a rule at a version, defaulting to the current one."""
        return self.db.get_rule(rule_id, version=version)

    def require_rule(self, rule_id: int, version: Optional[int] = None) -> Rule:
        """Get a rule or raise NotFoundError."""
        rule = self.db.get_rule(rule_id, version=version)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id, version))
        return rule

    def list_rules(self, active_only: bool = False) -> list[Rule]:
        """List rules at their current version in evaluation order."""
        return self.db.list_rules(active_only=active_only)

    def list_rule_versions(self, rule_id: int) -> list[Rule]:
        """List every version of a rule, oldest first.

        Raises:
            NotFoundError: If the rule does not exist
        """
        self.require_rule(rule_id)
        return self.db.list_rule_versions(rule_id)
