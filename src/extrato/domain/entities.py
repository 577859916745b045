"""Domain model entities for extrato.

These are pure data classes representing business concepts, independent of
database schema. Entities reference each other by id only; lookups go through
the Database interface.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Income or expense."""

    RECEITA = "RECEITA"
    DESPESA = "DESPESA"


class ClassificationSource(str, Enum):
    """How a transaction got its category."""

    RULE = "RULE"
    OVERRIDE = "OVERRIDE"
    NONE = "NONE"


class MatcherType(str, Enum):
    """How a rule pattern is tested against a document."""

    CONTAINS = "CONTAINS"
    REGEX = "REGEX"


class Encoding(str, Enum):
    """Detected text encoding of an uploaded file."""

    UTF8 = "UTF8"
    LATIN1 = "LATIN1"

    @property
    def codec(self) -> str:
        return "utf-8-sig" if self is Encoding.UTF8 else "latin-1"


class BatchStatus(str, Enum):
    """Import batch lifecycle."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class ActorContext:
    """Identity of whoever performs an operation, supplied by the caller."""

    actor: str


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: Optional[str]
    account_number: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Classification bucket with its transaction type."""

    id: int
    name: str
    tipo: TransactionType
    created_at: datetime


@dataclass(frozen=True)
class ImportBatch:
    """One CSV upload."""

    id: int
    account_id: int
    uploaded_by: str
    uploaded_at: datetime
    file_checksum: str
    period_month: int
    period_year: int
    encoding: Encoding
    row_count: int
    status: BatchStatus


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    account_id: int
    batch_id: int
    date: date
    document_raw: str
    document: str
    amount: Decimal
    currency: str
    row_hash: str
    category_id: Optional[int]
    tipo: Optional[TransactionType]
    classification_source: ClassificationSource
    rule_id: Optional[int]
    rule_version: Optional[int]
    rationale: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Rule:
    """A rule joined with one of its versions.

    ``created_at`` is when the rule was first created and drives evaluation
    order; ``version_created_at`` is when this particular version was written.
    """

    id: int
    version: int
    name: str
    matcher_type: MatcherType
    pattern: str
    category_id: int
    tipo: TransactionType
    priority: int
    active: bool
    current_version: int
    created_by: str
    created_at: datetime
    version_created_at: datetime


@dataclass(frozen=True)
class ClassificationOverride:
    """Append-only audit record of a manual correction."""

    id: int
    transaction_id: int
    previous_category_id: Optional[int]
    previous_tipo: Optional[TransactionType]
    previous_source: ClassificationSource
    previous_override_id: Optional[int]
    new_category_id: int
    new_tipo: TransactionType
    actor: str
    reason: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ParsedRow:
    """A validated, normalized CSV row ready for import."""

    date: date
    document_raw: str
    document: str
    amount: Decimal


@dataclass(frozen=True)
class RuleMatch:
    """The rule that won for a document, with its explanation."""

    rule: Rule
    rationale: str


@dataclass(frozen=True)
class ClassificationRun:
    """Counters from one pass of the rule engine."""

    evaluated: int = 0
    classified: int = 0
    unmatched: int = 0
    conflicts: int = 0


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a committed import."""

    batch: ImportBatch
    inserted: int
    skipped: int
    out_of_period: int = 0
    classification: Optional[ClassificationRun] = None


@dataclass(frozen=True)
class Explanation:
    """Why a transaction carries its current classification.

    ``rule`` is the exact rule version that classified it (source RULE);
    ``overrides`` is its override chain, oldest first.
    """

    transaction: Transaction
    rule: Optional[Rule]
    overrides: list[ClassificationOverride]
