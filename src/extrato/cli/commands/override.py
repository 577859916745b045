"""Manual override command."""

import click
from extrato.domain.category import CategoryService
from extrato.domain.errors import DomainError
from extrato.domain.override import OverrideService

from extrato.cli.account_resolution import resolve_category_or_exit
from extrato.cli.error_handling import handle_domain_error


@click.command("override")
@click.argument("transaction_id", type=int)
@click.argument("category")
@click.option(
    "--type",
    "tipo",
    type=click.Choice(["RECEITA", "DESPESA"], case_sensitive=False),
    required=True,
    help="New transaction type",
)
@click.option("--reason", help="Why the classification is being corrected")
@click.pass_context
def override(ctx, transaction_id: int, category: str, tipo: str, reason: str | None):
    """Set a transaction's category by hand.

    CATEGORY can be a category name or ID. The previous classification is
    kept in the override history.

    Examples:
        extrato override 42 Lazer --type despesa --reason "cinema, not food"
    """
    db = ctx.obj["db"]
    target = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        record = OverrideService(db).override(
            ctx.obj["actor"],
            transaction_id,
            new_category_id=target.id,
            new_type=tipo,
            reason=reason,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Transaction {transaction_id} set to '{target.name}' ({record.new_tipo.value}) "
        f"by override #{record.id}"
    )


def register_commands(cli):
    """Register override command with main CLI."""
    cli.add_command(override)
