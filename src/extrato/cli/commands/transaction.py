"""Transaction viewing commands."""

import click
from extrato.domain.account import AccountService
from extrato.domain.category import CategoryService
from extrato.domain.errors import DomainError
from extrato.domain.transaction import TransactionService

from extrato.cli.account_resolution import resolve_account_or_exit
from extrato.cli.display import format_amount, print_override, print_rule, print_transaction_table
from extrato.cli.error_handling import handle_domain_error


@click.command("transactions")
@click.option("--account", help="Account name or ID")
@click.option("--batch", "batch_id", type=int, help="Import batch ID")
@click.option(
    "--source",
    type=click.Choice(["RULE", "OVERRIDE", "NONE"], case_sensitive=False),
    help="Classification source",
)
@click.option("--month", type=int, help="Month (1-12); requires --year")
@click.option("--year", type=int, help="Year")
@click.option("--limit", type=int, help="Maximum number of transactions")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    batch_id: int | None,
    source: str | None,
    month: int | None,
    year: int | None,
    limit: int | None,
):
    """View transactions with optional filters.

    Examples:
        extrato transactions --source none
        extrato transactions --account "Conta Corrente" --month 1 --year 2025
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        transactions = service.list_transactions(
            account_id=account_id,
            batch_id=batch_id,
            classification_source=source,
            period_month=month,
            period_year=year,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    categories = {c.id: c.name for c in CategoryService(db).list_categories()}
    print_transaction_table(transactions, categories)


@click.command("explain")
@click.argument("transaction_id", type=int)
@click.pass_context
def explain(ctx, transaction_id: int):
    """Explain why a transaction has its current classification."""
    db = ctx.obj["db"]
    try:
        explanation = TransactionService(db).explain(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = explanation.transaction
    categories = {c.id: c.name for c in CategoryService(db).list_categories()}

    click.echo(f"Transaction {txn.id}")
    click.echo(f"  Date: {txn.date:%d/%m/%Y}")
    click.echo(f"  Document: {txn.document}")
    click.echo(f"  Amount: {format_amount(txn.amount, txn.currency)}")
    click.echo(f"  Account: {txn.account_id}  Batch: {txn.batch_id}")
    click.echo(f"  Source: {txn.classification_source.value}")
    if txn.category_id is not None:
        click.echo(f"  Category: {categories.get(txn.category_id, txn.category_id)} ({txn.tipo.value})")
    if txn.rationale:
        click.echo(f"  Rationale: {txn.rationale}")

    if explanation.rule is not None:
        click.echo("\nMatched rule version:")
        rule = explanation.rule
        print_rule(rule, categories.get(rule.category_id, str(rule.category_id)))

    if explanation.overrides:
        click.echo("\nOverride history:")
        for record in explanation.overrides:
            print_override(record, categories)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions)
    cli.add_command(explain)
