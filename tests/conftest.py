"""Shared pytest fixtures for extrato tests."""

import tempfile
import os
import pytest

from extrato.database.factories import create_sqlite_database
from extrato.domain.account import AccountService
from extrato.domain.category import CategoryService
from extrato.domain.classification import ClassificationService
from extrato.domain.csv_import import CSVImportService
from extrato.domain.entities import ActorContext
from extrato.domain.override import OverrideService
from extrato.domain.rule import RuleService
from extrato.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def actor():
    """Identity used for mutating calls in tests."""
    return ActorContext(actor="tester")


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def classification_service(temp_db):
    """Create a ClassificationService with a temporary database."""
    return ClassificationService(temp_db)


@pytest.fixture
def override_service(temp_db):
    """Create an OverrideService with a temporary database."""
    return OverrideService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(
        name="Conta Corrente", bank_name="Banco Teste", account_number="70011-8"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_categories(category_service):
    """Create the default categories and return them by name."""
    category_service.create_default_categories()
    return {c.name: c for c in category_service.list_categories()}


@pytest.fixture
def padaria_rule(rule_service, actor, sample_categories):
    """Active CONTAINS rule sending bakery purchases to food."""
    food = sample_categories["Alimentação"]
    return rule_service.create_rule(
        actor,
        name="padaria",
        matcher_type="CONTAINS",
        pattern="padaria",
        category_id=food.id,
        tipo=food.tipo,
    )


@pytest.fixture
def make_csv():
    """Build statement file bytes from (date, document, amount) rows."""

    def _make(rows, encoding="utf-8", delimiter=";", header=True):
        lines = []
        if header:
            lines.append(delimiter.join(["Data", "Histórico", "Valor"]))
        for row in rows:
            lines.append(delimiter.join(row))
        return ("\r\n".join(lines) + "\r\n").encode(encoding)

    return _make


@pytest.fixture
def statement_rows():
    """Five statement lines from January 2025."""
    return [
        ("02/01/2025", "TRANSF PADARIA CENTRAL", "-23,50"),
        ("03/01/2025", "PIX RECEBIDO EMPRESA XYZ", "5.000,00"),
        ("05/01/2025", "SUPERMERCADO BOM PREÇO", "(312,45)"),
        ("10/01/2025", "TARIFA PACOTE SERVIÇOS", "-39,90"),
        ("15/01/2025", "CAFÉ JOSÉ", "R$ -8,00"),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
