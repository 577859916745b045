"""Account management commands."""

import click
from extrato.domain.account import AccountService
from extrato.domain.errors import DomainError

from extrato.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name")
@click.option("--number", "account_number", help="Bank account number (e.g. 70011-8)")
@click.pass_context
def create_account(ctx, name: str, bank: str | None, account_number: str | None):
    """Create a new account.

    Examples:
        extrato account create "Conta Corrente"
        extrato account create "PJ" --bank "Banco do Brasil" --number 70011-8
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(
            name=name, bank_name=bank, account_number=account_number
        )
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name or '-'}"
            f" | Number: {acc.account_number or '-'}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
