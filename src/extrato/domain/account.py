"""Account domain service."""

from typing import Optional
from extrato.database.base import Database
from extrato.domain.entities import Account as AccountEntity
from extrato.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, bank_name: Optional[str] = None, account_number: Optional[str] = None
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            bank_name: Optional bank name
            account_number: Optional bank account number (e.g. "70011-8")

        Returns:
            Account ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If account name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty")

        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name, bank_name=bank_name, account_number=account_number
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        """Get account by name."""
        return self.db.get_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
