"""Rule engine commands."""

import click
from extrato.domain.account import AccountService
from extrato.domain.classification import ClassificationService
from extrato.domain.errors import DomainError

from extrato.cli.account_resolution import resolve_account_or_exit
from extrato.cli.error_handling import handle_domain_error


@click.command("classify")
@click.option("--account", help="Only classify this account (name or ID)")
@click.option("--transaction", "transaction_id", type=int, help="Classify a single transaction")
@click.pass_context
def classify(ctx, account: str | None, transaction_id: int | None):
    """Classify unclassified transactions with the active rules.

    Transactions classified by a rule or by hand are never touched, so the
    command can be run as often as needed.
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    if transaction_id is not None:
        try:
            match = service.classify_transaction(ctx.obj["actor"], transaction_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        if match is None:
            click.echo(f"Transaction {transaction_id} was not classified")
        else:
            click.echo(f"Transaction {transaction_id}: {match.rationale}")
        return

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        run = service.classify_pending(ctx.obj["actor"], account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("\nClassification complete:")
    click.echo(f"  Evaluated: {run.evaluated}")
    click.echo(f"  Classified: {run.classified}")
    click.echo(f"  Unmatched: {run.unmatched}")
    if run.conflicts:
        click.echo(f"  Skipped (changed meanwhile): {run.conflicts}")


@click.command("reset")
@click.argument("transaction_id", type=int, required=False)
@click.option("--rule", "rule_id", type=int, help="Reset every transaction classified by this rule")
@click.pass_context
def reset(ctx, transaction_id: int | None, rule_id: int | None):
    """Return rule-classified transactions to unclassified.

    Manual overrides cannot be reset; override them again instead.
    """
    if (transaction_id is None) == (rule_id is None):
        click.echo("Error: Give either TRANSACTION_ID or --rule", err=True)
        ctx.exit(1)

    service = ClassificationService(ctx.obj["db"])
    try:
        if rule_id is not None:
            count = service.reset_rule(ctx.obj["actor"], rule_id)
            click.echo(f"Reset {count} transaction(s) classified by rule {rule_id}")
        else:
            service.reset_classification(ctx.obj["actor"], transaction_id)
            click.echo(f"Transaction {transaction_id} is unclassified")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify)
    cli.add_command(reset)
