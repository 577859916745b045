"""Tests for mapper functions between ORM and domain models."""

from datetime import date, datetime
from decimal import Decimal

from extrato.database import mappers
from extrato.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    ClassificationOverride as ORMClassificationOverride,
    ImportBatch as ORMImportBatch,
    Rule as ORMRule,
    RuleVersion as ORMRuleVersion,
    Transaction as ORMTransaction,
)
from extrato.domain import entities as domain

CREATED = datetime(2025, 1, 31, 12, 0)


def test_account_to_domain():
    orm_account = ORMAccount(
        id=1, name="Conta", bank_name="Banco", account_number="123", created_at=CREATED
    )

    account = mappers.account_to_domain(orm_account)

    assert account == domain.Account(
        id=1, name="Conta", bank_name="Banco", account_number="123", created_at=CREATED
    )


def test_category_to_domain():
    category = mappers.category_to_domain(
        ORMCategory(id=2, name="Vendas", tipo="RECEITA", created_at=CREATED)
    )

    assert category.tipo is domain.TransactionType.RECEITA


def test_import_batch_to_domain():
    batch = mappers.import_batch_to_domain(
        ORMImportBatch(
            id=3,
            account_id=1,
            uploaded_by="ana",
            uploaded_at=CREATED,
            file_checksum="f" * 64,
            period_month=1,
            period_year=2025,
            encoding="LATIN1",
            row_count=12,
            status="COMPLETED",
        )
    )

    assert batch.encoding is domain.Encoding.LATIN1
    assert batch.status is domain.BatchStatus.COMPLETED
    assert batch.row_count == 12


class TestTransactionToDomain:
    """Tests for transaction mapping."""

    def _orm(self, **overrides):
        values = dict(
            id=4,
            account_id=1,
            batch_id=3,
            date=date(2025, 1, 2),
            document_raw="Padaria  Central",
            document="PADARIA CENTRAL",
            amount=Decimal("-23.50"),
            currency="BRL",
            row_hash="h" * 64,
            category_id=None,
            tipo=None,
            classification_source="NONE",
            rule_id=None,
            rule_version=None,
            rationale=None,
            created_at=CREATED,
        )
        values.update(overrides)
        return ORMTransaction(**values)

    def test_unclassified(self):
        txn = mappers.transaction_to_domain(self._orm())

        assert txn.classification_source is domain.ClassificationSource.NONE
        assert txn.tipo is None
        assert txn.amount == Decimal("-23.50")

    def test_rule_classified(self):
        txn = mappers.transaction_to_domain(
            self._orm(
                category_id=7,
                tipo="DESPESA",
                classification_source="RULE",
                rule_id=2,
                rule_version=3,
                rationale="Rule #2 v3 'padaria' matched: contains 'padaria'",
            )
        )

        assert txn.classification_source is domain.ClassificationSource.RULE
        assert txn.tipo is domain.TransactionType.DESPESA
        assert (txn.rule_id, txn.rule_version) == (2, 3)


def test_rule_to_domain_combines_head_and_version():
    """Head fields come from the rule, match fields and author from the version."""
    head = ORMRule(
        id=5, name="pix", priority=10, active=False, current_version=2,
        created_by="ana", created_at=CREATED,
    )
    version_created = datetime(2025, 2, 1, 9, 30)
    version = ORMRuleVersion(
        rule_id=5, version=1, matcher_type="REGEX", pattern="^PIX", category_id=8,
        tipo="RECEITA", created_by="bia", created_at=version_created,
    )

    rule = mappers.rule_to_domain(head, version)

    assert rule.version == 1
    assert rule.current_version == 2
    assert rule.matcher_type is domain.MatcherType.REGEX
    assert rule.tipo is domain.TransactionType.RECEITA
    assert rule.active is False
    assert rule.priority == 10
    assert rule.created_by == "bia"
    assert rule.created_at == CREATED
    assert rule.version_created_at == version_created


def test_override_to_domain():
    record = mappers.override_to_domain(
        ORMClassificationOverride(
            id=9,
            transaction_id=4,
            previous_category_id=None,
            previous_tipo=None,
            previous_source="NONE",
            previous_override_id=None,
            new_category_id=7,
            new_tipo="DESPESA",
            actor="ana",
            reason=None,
            created_at=CREATED,
        )
    )

    assert record.previous_tipo is None
    assert record.previous_source is domain.ClassificationSource.NONE
    assert record.new_tipo is domain.TransactionType.DESPESA
