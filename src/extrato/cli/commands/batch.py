"""Import batch commands."""

import click
from extrato.domain.account import AccountService
from extrato.domain.category import CategoryService
from extrato.domain.csv_import import CSVImportService
from extrato.domain.errors import DomainError

from extrato.cli.account_resolution import resolve_account_or_exit
from extrato.cli.display import print_transaction_table
from extrato.cli.error_handling import handle_domain_error


@click.group()
def batch_group():
    """Inspect import batches."""
    pass


@batch_group.command("list")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_batches(ctx, account: str | None):
    """List import batches, newest first."""
    db = ctx.obj["db"]
    service = CSVImportService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    batches = service.list_batches(account_id=account_id)
    if not batches:
        click.echo("No import batches found.")
        return

    click.echo(f"\n{'ID':<6} {'Account':<8} {'Period':<8} {'Rows':>6}  {'Encoding':<8} {'Uploaded':<17} By")
    click.echo("-" * 80)
    for b in batches:
        click.echo(
            f"{b.id:<6} {b.account_id:<8} {b.period_month:02d}/{b.period_year} {b.row_count:>6}  "
            f"{b.encoding.value:<8} {b.uploaded_at:%Y-%m-%d %H:%M}  {b.uploaded_by}"
        )


@batch_group.command("show")
@click.argument("batch_id", type=int)
@click.option("--limit", type=int, help="Maximum number of transactions to show")
@click.pass_context
def show_batch(ctx, batch_id: int, limit: int | None):
    """Show a batch and the transactions it imported."""
    db = ctx.obj["db"]
    service = CSVImportService(db)

    try:
        batch = service.require_batch(batch_id)
        transactions = service.list_batch_transactions(batch_id, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Batch {batch.id} [{batch.status.value}]")
    click.echo(f"  Account: {batch.account_id}")
    click.echo(f"  Period: {batch.period_month:02d}/{batch.period_year}")
    click.echo(f"  Uploaded: {batch.uploaded_at:%Y-%m-%d %H:%M} by {batch.uploaded_by}")
    click.echo(f"  Encoding: {batch.encoding.value}")
    click.echo(f"  Checksum: {batch.file_checksum}")
    click.echo(f"  Rows: {batch.row_count}")

    if transactions:
        categories = {c.id: c.name for c in CategoryService(db).list_categories()}
        print_transaction_table(transactions, categories)


def register_commands(cli):
    """Register batch commands with main CLI."""
    cli.add_command(batch_group, name="batch")
