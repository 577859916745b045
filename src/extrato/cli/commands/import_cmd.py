"""CSV import command."""

import click
from extrato.domain.account import AccountService
from extrato.domain.csv_import import CSVImportService
from extrato.domain.errors import DomainError

from extrato.cli.account_resolution import resolve_account_or_exit
from extrato.cli.error_handling import handle_domain_error


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--month", type=int, required=True, help="Statement month (1-12)")
@click.option("--year", type=int, required=True, help="Statement year")
@click.option("--classify", is_flag=True, help="Run classification rules after importing")
@click.option("--no-header", is_flag=True, help="The file has no header row")
@click.pass_context
def import_csv(
    ctx, csv_file: str, account: str, month: int, year: int, classify: bool, no_header: bool
):
    """Import a bank statement CSV file.

    Columns are date (DD/MM/YYYY), description and amount (pt-BR format).

    Examples:
        extrato import extrato_jan.csv --account "Conta Corrente" --month 1 --year 2025
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        with open(csv_file, "rb") as f:
            result = service.import_file(
                ctx.obj["actor"],
                account_id=account_id,
                source=f,
                period_month=month,
                period_year=year,
                classify=classify,
                has_header=not no_header,
            )
    except DomainError as e:
        handle_domain_error(ctx, e)

    batch = result.batch
    click.echo("\nImport complete:")
    click.echo(f"  Batch: {batch.id} ({batch.encoding.value})")
    click.echo(f"  Rows: {batch.row_count}")
    click.echo(f"  Imported: {result.inserted} transactions")
    click.echo(f"  Skipped: {result.skipped} already imported")
    if result.out_of_period:
        click.echo(
            f"  Warning: {result.out_of_period} rows dated outside {month:02d}/{year}", err=True
        )
    if result.classification is not None:
        run = result.classification
        click.echo(f"  Classified: {run.classified} ({run.unmatched} unmatched)")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
