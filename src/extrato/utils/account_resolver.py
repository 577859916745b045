"""Resolve an account given by name or ID on the command line."""

from extrato.domain.account import AccountService
from extrato.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Return the ID of the account named or numbered by ``account``.

    Digit-only strings are treated as IDs, so an account literally named
    "7" can only be addressed by its ID.

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, str) and account.strip().isdigit():
        account = int(account)

    if isinstance(account, int):
        return account_service.require_account(account).id

    found = account_service.get_account_by_name(account.strip())
    if found is None:
        raise NotFoundError(f"Account '{account}' not found")
    return found.id
