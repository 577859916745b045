"""SQLAlchemy models for extrato database.

Rows reference each other by foreign key only; there are no ORM relationships,
so every lookup goes through an explicit query in the Database implementation.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    ForeignKeyConstraint,
    UniqueConstraint,
    Index,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    bank_name = Column(String(255), nullable=True)
    account_number = Column(String(50), unique=True, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Category(Base):
    """Classification category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    tipo = Column(String(16), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class ImportBatch(Base):
    """One CSV upload. Never updated after its unit of work commits."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    uploaded_by = Column(String(255), nullable=False)
    uploaded_at = Column(DateTime, default=_now, nullable=False)
    file_checksum = Column(String(64), nullable=False)
    period_month = Column(Integer, nullable=False)
    period_year = Column(Integer, nullable=False)
    encoding = Column(String(8), nullable=False, default="UTF8")
    row_count = Column(Integer, nullable=False, default=0)
    status = Column(String(16), nullable=False, default="PENDING")

    __table_args__ = (
        UniqueConstraint(
            "account_id",
            "file_checksum",
            "period_month",
            "period_year",
            name="uq_import_batch_file_period",
        ),
        CheckConstraint("period_month >= 1 AND period_month <= 12", name="ck_import_batch_month"),
        CheckConstraint("row_count >= 0", name="ck_import_batch_row_count"),
    )


class Rule(Base):
    """Stable rule identity. Matching behavior lives in RuleVersion."""

    __tablename__ = "rules"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    priority = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    current_version = Column(Integer, nullable=False, default=1)
    created_by = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class RuleVersion(Base):
    """Immutable matching definition of a rule at a given version."""

    __tablename__ = "rule_versions"

    rule_id = Column(Integer, ForeignKey("rules.id"), primary_key=True)
    version = Column(Integer, primary_key=True, autoincrement=False)
    matcher_type = Column(String(16), nullable=False)
    pattern = Column(String(1024), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    tipo = Column(String(16), nullable=False)
    created_by = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    batch_id = Column(Integer, ForeignKey("import_batches.id"), nullable=False)
    date = Column(Date, nullable=False)
    document_raw = Column(String(255), nullable=False)
    document = Column(String(255), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="BRL")
    row_hash = Column(String(64), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    tipo = Column(String(16), nullable=True)
    classification_source = Column(String(16), nullable=False, default="NONE")
    rule_id = Column(Integer, nullable=True)
    rule_version = Column(Integer, nullable=True)
    rationale = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "row_hash", name="uq_transaction_account_row_hash"),
        ForeignKeyConstraint(
            ["rule_id", "rule_version"], ["rule_versions.rule_id", "rule_versions.version"]
        ),
        CheckConstraint(
            "(classification_source = 'RULE' AND rule_id IS NOT NULL"
            " AND rule_version IS NOT NULL AND rationale IS NOT NULL)"
            " OR (classification_source = 'OVERRIDE' AND rule_id IS NULL)"
            " OR (classification_source = 'NONE' AND rule_id IS NULL AND category_id IS NULL)",
            name="ck_transaction_classification",
        ),
    )


class ClassificationOverride(Base):
    """Append-only audit record of a manual classification."""

    __tablename__ = "classification_overrides"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    previous_category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    previous_tipo = Column(String(16), nullable=True)
    previous_source = Column(String(16), nullable=False)
    # Unique so two concurrent overrides cannot both extend the same chain link.
    previous_override_id = Column(
        Integer, ForeignKey("classification_overrides.id"), unique=True, nullable=True
    )
    new_category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    new_tipo = Column(String(16), nullable=False)
    actor = Column(String(255), nullable=False)
    reason = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        # One chain root per transaction; later links hang off previous_override_id.
        Index(
            "uq_override_chain_root",
            "transaction_id",
            unique=True,
            sqlite_where=text("previous_override_id IS NULL"),
            postgresql_where=text("previous_override_id IS NULL"),
        ),
    )


def create_database_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for the given URL."""
    return create_engine(database_url, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to an engine."""
    return sessionmaker(bind=engine)
