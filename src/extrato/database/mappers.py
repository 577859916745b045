"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the string-to-enum
conversion for columns stored as plain strings.
"""

from typing import Optional

from extrato.domain import entities as domain
from extrato.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    ImportBatch as ORMImportBatch,
    Transaction as ORMTransaction,
    Rule as ORMRule,
    RuleVersion as ORMRuleVersion,
    ClassificationOverride as ORMClassificationOverride,
)


def _tipo(value: Optional[str]) -> Optional[domain.TransactionType]:
    return domain.TransactionType(value) if value is not None else None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        account_number=orm_account.account_number,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        tipo=domain.TransactionType(orm_category.tipo),
        created_at=orm_category.created_at,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        account_id=orm_batch.account_id,
        uploaded_by=orm_batch.uploaded_by,
        uploaded_at=orm_batch.uploaded_at,
        file_checksum=orm_batch.file_checksum,
        period_month=orm_batch.period_month,
        period_year=orm_batch.period_year,
        encoding=domain.Encoding(orm_batch.encoding),
        row_count=orm_batch.row_count,
        status=domain.BatchStatus(orm_batch.status),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        batch_id=orm_transaction.batch_id,
        date=orm_transaction.date,
        document_raw=orm_transaction.document_raw,
        document=orm_transaction.document,
        amount=orm_transaction.amount,
        currency=orm_transaction.currency,
        row_hash=orm_transaction.row_hash,
        category_id=orm_transaction.category_id,
        tipo=_tipo(orm_transaction.tipo),
        classification_source=domain.ClassificationSource(orm_transaction.classification_source),
        rule_id=orm_transaction.rule_id,
        rule_version=orm_transaction.rule_version,
        rationale=orm_transaction.rationale,
        created_at=orm_transaction.created_at,
    )


def rule_to_domain(orm_rule: ORMRule, orm_version: ORMRuleVersion) -> domain.Rule:
    """Combine a rule and one of its versions into a domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        version=orm_version.version,
        name=orm_rule.name,
        matcher_type=domain.MatcherType(orm_version.matcher_type),
        pattern=orm_version.pattern,
        category_id=orm_version.category_id,
        tipo=domain.TransactionType(orm_version.tipo),
        priority=orm_rule.priority,
        active=orm_rule.active,
        current_version=orm_rule.current_version,
        created_by=orm_version.created_by,
        created_at=orm_rule.created_at,
        version_created_at=orm_version.created_at,
    )


def override_to_domain(orm_override: ORMClassificationOverride) -> domain.ClassificationOverride:
    """Convert SQLAlchemy ClassificationOverride model to domain entity."""
    return domain.ClassificationOverride(
        id=orm_override.id,
        transaction_id=orm_override.transaction_id,
        previous_category_id=orm_override.previous_category_id,
        previous_tipo=_tipo(orm_override.previous_tipo),
        previous_source=domain.ClassificationSource(orm_override.previous_source),
        previous_override_id=orm_override.previous_override_id,
        new_category_id=orm_override.new_category_id,
        new_tipo=domain.TransactionType(orm_override.new_tipo),
        actor=orm_override.actor,
        reason=orm_override.reason,
        created_at=orm_override.created_at,
    )
