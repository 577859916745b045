"""Tests for categories: service and commands."""

import pytest
from extrato.cli.main import cli
from extrato.domain.category import DEFAULT_CATEGORIES, parse_transaction_type
from extrato.domain.entities import TransactionType
from extrato.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_category(category_service):
    category_id = category_service.create_category("Pets", "despesa")

    category = category_service.get_category(category_id)
    assert category.name == "Pets"
    assert category.tipo is TransactionType.DESPESA


def test_create_category_duplicate(category_service):
    category_service.create_category("Pets", "DESPESA")
    with pytest.raises(ConflictError):
        category_service.create_category("Pets", "RECEITA")


def test_create_category_requires_type(category_service):
    with pytest.raises(ValidationError):
        category_service.create_category("Pets", None)


def test_default_categories(category_service):
    created = category_service.create_default_categories()

    assert created == len(DEFAULT_CATEGORIES)
    assert category_service.create_default_categories() == 0
    receitas = category_service.list_categories(tipo="RECEITA")
    assert {c.name for c in receitas} == {
        name for name, tipo in DEFAULT_CATEGORIES if tipo is TransactionType.RECEITA
    }


def test_resolve_category(category_service, sample_categories):
    lazer = sample_categories["Lazer"]
    assert category_service.resolve_category("Lazer") == lazer
    assert category_service.resolve_category(str(lazer.id)) == lazer
    assert category_service.resolve_category(lazer.id) == lazer
    with pytest.raises(NotFoundError):
        category_service.resolve_category("Inexistente")


@pytest.mark.parametrize("value", ["receita", " RECEITA ", TransactionType.RECEITA])
def test_parse_transaction_type(value):
    assert parse_transaction_type(value) is TransactionType.RECEITA


def test_init_categories_command(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "init-categories"])

    assert result.exit_code == 0
    assert f"Successfully created {len(DEFAULT_CATEGORIES)} categories" in result.output

    again = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "init-categories"])
    assert "already exist" in again.output


def test_category_create_and_list_commands(cli_runner, temp_db):
    created = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "create", "Pets", "--type", "despesa"]
    )
    assert created.exit_code == 0
    assert "Created category 'Pets'" in created.output

    listed = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])
    assert listed.exit_code == 0
    assert "DESPESA" in listed.output
    assert "Pets" in listed.output


def test_category_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])
    assert "init-categories" in result.output
