"""CLI helpers for account and category resolution."""

from __future__ import annotations

import click
from extrato.domain.account import AccountService
from extrato.domain.category import CategoryService
from extrato.domain.entities import Category
from extrato.domain.errors import DomainError
from extrato.utils.account_resolver import resolve_account

from extrato.cli.error_handling import handle_domain_error


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, category: str | int
) -> Category:
    """Resolve category name or ID, or exit with a CLI error."""
    try:
        return category_service.resolve_category(category)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
