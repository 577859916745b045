"""Shared output formatting for CLI commands."""

from decimal import Decimal

import click
from extrato.domain.entities import ClassificationOverride, Rule, Transaction


def format_amount(amount: Decimal, currency: str = "BRL") -> str:
    """Format an amount in pt-BR notation, e.g. -1.234,56."""
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{currency} {text}"


def print_transaction_table(transactions: list[Transaction], categories: dict[int, str]) -> None:
    """Print transactions as a compact table."""
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>18}  {'Source':<9} {'Category':<22} {'Document':<40}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        category_name = categories.get(txn.category_id, "") if txn.category_id else ""
        click.echo(
            f"{txn.id:<6} {txn.date:%d/%m/%Y}   {format_amount(txn.amount, txn.currency):>18}  "
            f"{txn.classification_source.value:<9} {category_name[:22]:<22} {txn.document[:40]}"
        )


def print_rule(rule: Rule, category_name: str) -> None:
    """Print one rule version."""
    state = "active" if rule.active else "inactive"
    current = " (current)" if rule.version == rule.current_version else ""
    click.echo(f"Rule #{rule.id} '{rule.name}' v{rule.version}{current} [{state}]")
    click.echo(f"  Priority: {rule.priority}")
    click.echo(f"  Match: {rule.matcher_type.value} '{rule.pattern}'")
    click.echo(f"  Category: {category_name} ({rule.tipo.value})")
    click.echo(f"  Created by {rule.created_by} at {rule.version_created_at:%Y-%m-%d %H:%M}")


def print_override(record: ClassificationOverride, categories: dict[int, str]) -> None:
    """Print one override audit record."""
    before = (
        f"{categories.get(record.previous_category_id, record.previous_category_id)}"
        f" ({record.previous_tipo.value})"
        if record.previous_category_id is not None
        else "unclassified"
    )
    after = f"{categories.get(record.new_category_id, record.new_category_id)} ({record.new_tipo.value})"
    click.echo(
        f"  Override #{record.id} at {record.created_at:%Y-%m-%d %H:%M} by {record.actor}: "
        f"{before} [{record.previous_source.value}] -> {after}"
    )
    if record.reason:
        click.echo(f"    Reason: {record.reason}")
