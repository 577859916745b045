"""Tests for import, rule, classification and override commands."""

import pytest
from extrato.cli.main import cli
from extrato.domain.entities import ClassificationSource


@pytest.fixture
def statement_file(tmp_path, make_csv, statement_rows):
    path = tmp_path / "extrato_jan.csv"
    path.write_bytes(make_csv(statement_rows))
    return path


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--actor", "ana", *args])


def import_statement(cli_runner, temp_db, path, *extra):
    return invoke(
        cli_runner, temp_db, "import", str(path), "--account", "Conta Corrente",
        "--month", "1", "--year", "2025", *extra,
    )


class TestImportCommand:
    """Tests for the import command."""

    def test_import_successful(self, cli_runner, temp_db, sample_account, statement_file):
        result = import_statement(cli_runner, temp_db, statement_file)

        assert result.exit_code == 0
        assert "Import complete" in result.output
        assert "Imported: 5 transactions" in result.output
        assert "Skipped: 0" in result.output
        [batch] = temp_db.list_import_batches()
        assert batch.uploaded_by == "ana"

    def test_import_by_account_id(self, cli_runner, temp_db, sample_account, statement_file):
        result = invoke(
            cli_runner, temp_db, "import", str(statement_file), "--account", str(sample_account.id),
            "--month", "1", "--year", "2025",
        )
        assert result.exit_code == 0

    def test_import_duplicate(self, cli_runner, temp_db, sample_account, statement_file):
        import_statement(cli_runner, temp_db, statement_file)

        result = import_statement(cli_runner, temp_db, statement_file)

        assert result.exit_code == 1
        assert "Error: File already imported" in result.output
        assert "batch 1" in result.output
        assert temp_db.count_transactions() == 5

    def test_import_bad_row(self, cli_runner, temp_db, sample_account, tmp_path, make_csv):
        path = tmp_path / "ruim.csv"
        path.write_bytes(make_csv([("02/01/2025", "OK", "1,00"), ("02/01/2025", "RUIM", "abc")]))

        result = import_statement(cli_runner, temp_db, path)

        assert result.exit_code == 1
        assert "Error: Row 3: Invalid amount format" in result.output
        assert temp_db.count_transactions() == 0

    def test_import_unknown_account(self, cli_runner, temp_db, statement_file):
        result = import_statement(cli_runner, temp_db, statement_file)
        assert result.exit_code == 1
        assert "Account 'Conta Corrente' not found" in result.output

    def test_import_with_classify(self, cli_runner, temp_db, sample_account, padaria_rule, statement_file):
        result = import_statement(cli_runner, temp_db, statement_file, "--classify")

        assert result.exit_code == 0
        assert "Classified: 1 (4 unmatched)" in result.output

    def test_batch_list_and_show(self, cli_runner, temp_db, sample_account, statement_file):
        import_statement(cli_runner, temp_db, statement_file)

        listed = invoke(cli_runner, temp_db, "batch", "list")
        assert listed.exit_code == 0
        assert "01/2025" in listed.output
        assert "ana" in listed.output

        shown = invoke(cli_runner, temp_db, "batch", "show", "1")
        assert shown.exit_code == 0
        assert "Batch 1 [COMPLETED]" in shown.output
        assert "TRANSF PADARIA CENTRAL" in shown.output

        missing = invoke(cli_runner, temp_db, "batch", "show", "9")
        assert missing.exit_code == 1
        assert "Import batch 9 not found" in missing.output


class TestRuleCommands:
    """Tests for rule commands."""

    def test_rule_add_and_list(self, cli_runner, temp_db, sample_categories):
        result = invoke(
            cli_runner, temp_db, "rule", "add", "padaria", "PADARIA", "--category", "Alimentação",
            "--priority", "5",
        )
        assert result.exit_code == 0
        assert "Created rule 'padaria' (ID: 1, version 1)" in result.output

        listed = invoke(cli_runner, temp_db, "rule", "list")
        assert "CONTAINS 'PADARIA'" in listed.output
        assert "Alimentação" in listed.output

    def test_rule_add_invalid_regex(self, cli_runner, temp_db, sample_categories):
        result = invoke(
            cli_runner, temp_db, "rule", "add", "ruim", "(", "--matcher", "regex",
            "--category", "Lazer",
        )
        assert result.exit_code == 1
        assert "Invalid regex pattern" in result.output

    def test_rule_update_versions(self, cli_runner, temp_db, padaria_rule):
        result = invoke(cli_runner, temp_db, "rule", "update", str(padaria_rule.id), "--pattern", "PAO")
        assert "updated to version 2" in result.output

        priority = invoke(cli_runner, temp_db, "rule", "update", str(padaria_rule.id), "--priority", "3")
        assert "priority set to 3" in priority.output

        history = invoke(cli_runner, temp_db, "rule", "show", str(padaria_rule.id), "--history")
        assert "v1" in history.output and "v2 (current)" in history.output

    def test_rule_deactivate_and_activate(self, cli_runner, temp_db, padaria_rule):
        off = invoke(cli_runner, temp_db, "rule", "deactivate", str(padaria_rule.id))
        assert off.exit_code == 0
        assert "[inactive]" in invoke(cli_runner, temp_db, "rule", "show", str(padaria_rule.id)).output

        on = invoke(cli_runner, temp_db, "rule", "activate", str(padaria_rule.id))
        assert on.exit_code == 0
        assert "[active]" in invoke(cli_runner, temp_db, "rule", "show", str(padaria_rule.id)).output

    def test_rule_show_missing(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "rule", "show", "5")
        assert result.exit_code == 1
        assert "Rule 5 not found" in result.output


class TestClassificationCommands:
    """Tests for classify, reset, override and explain."""

    @pytest.fixture
    def imported(self, cli_runner, temp_db, sample_account, padaria_rule, statement_file):
        import_statement(cli_runner, temp_db, statement_file)
        return {t.document: t for t in temp_db.list_transactions()}

    def test_classify(self, cli_runner, temp_db, imported):
        result = invoke(cli_runner, temp_db, "classify")

        assert result.exit_code == 0
        assert "Evaluated: 5" in result.output
        assert "Classified: 1" in result.output
        assert "Unmatched: 4" in result.output

    def test_classify_single_transaction(self, cli_runner, temp_db, imported):
        txn_id = imported["TRANSF PADARIA CENTRAL"].id
        result = invoke(cli_runner, temp_db, "classify", "--transaction", str(txn_id))
        assert "matched: contains 'padaria'" in result.output

    def test_reset(self, cli_runner, temp_db, imported):
        txn_id = imported["TRANSF PADARIA CENTRAL"].id
        invoke(cli_runner, temp_db, "classify")

        result = invoke(cli_runner, temp_db, "reset", str(txn_id))

        assert result.exit_code == 0
        assert temp_db.get_transaction(txn_id).classification_source is ClassificationSource.NONE

    def test_reset_requires_one_target(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "reset")
        assert result.exit_code == 1

    def test_override_and_explain(self, cli_runner, temp_db, imported):
        txn_id = imported["TRANSF PADARIA CENTRAL"].id
        invoke(cli_runner, temp_db, "classify")

        result = invoke(
            cli_runner, temp_db, "override", str(txn_id), "Lazer", "--type", "despesa",
            "--reason", "era um café",
        )
        assert result.exit_code == 0
        assert "set to 'Lazer' (DESPESA) by override #1" in result.output

        explained = invoke(cli_runner, temp_db, "explain", str(txn_id))
        assert explained.exit_code == 0
        assert "Source: OVERRIDE" in explained.output
        assert "Rationale: Override #1 by ana: era um café" in explained.output
        assert "[RULE] -> Lazer (DESPESA)" in explained.output

        reset = invoke(cli_runner, temp_db, "reset", str(txn_id))
        assert reset.exit_code == 1
        assert "manual override" in reset.output

    def test_override_unknown_transaction(self, cli_runner, temp_db, sample_categories):
        result = invoke(cli_runner, temp_db, "override", "404", "Lazer", "--type", "DESPESA")
        assert result.exit_code == 1
        assert "Transaction 404 not found" in result.output

    def test_override_unknown_category(self, cli_runner, temp_db, imported):
        result = invoke(cli_runner, temp_db, "override", "1", "Nada", "--type", "DESPESA")
        assert result.exit_code == 1
        assert "Category 'Nada' not found" in result.output

    def test_explain_rule(self, cli_runner, temp_db, imported):
        txn_id = imported["TRANSF PADARIA CENTRAL"].id
        invoke(cli_runner, temp_db, "classify")

        result = invoke(cli_runner, temp_db, "explain", str(txn_id))

        assert "Matched rule version:" in result.output
        assert "Match: CONTAINS 'padaria'" in result.output

    def test_transactions_filters(self, cli_runner, temp_db, imported):
        invoke(cli_runner, temp_db, "classify")

        unclassified = invoke(cli_runner, temp_db, "transactions", "--source", "none")
        assert unclassified.exit_code == 0
        assert "Found 4 transaction(s)" in unclassified.output
        assert "PADARIA" not in unclassified.output

        by_period = invoke(cli_runner, temp_db, "transactions", "--month", "2", "--year", "2025")
        assert "No transactions found" in by_period.output

        bad = invoke(cli_runner, temp_db, "transactions", "--month", "2")
        assert bad.exit_code == 1
