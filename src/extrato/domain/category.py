"""Category domain service."""

from typing import Optional
from extrato.database.base import Database
from extrato.domain.entities import Category as CategoryEntity, TransactionType
from extrato.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
)

# Default category set for personal/small-business bank statements.
DEFAULT_CATEGORIES = [
    ("Salário", TransactionType.RECEITA),
    ("Vendas", TransactionType.RECEITA),
    ("Rendimentos", TransactionType.RECEITA),
    ("Outras Receitas", TransactionType.RECEITA),
    ("Alimentação", TransactionType.DESPESA),
    ("Moradia", TransactionType.DESPESA),
    ("Transporte", TransactionType.DESPESA),
    ("Saúde", TransactionType.DESPESA),
    ("Educação", TransactionType.DESPESA),
    ("Lazer", TransactionType.DESPESA),
    ("Impostos e Taxas", TransactionType.DESPESA),
    ("Tarifas Bancárias", TransactionType.DESPESA),
    ("Outras Despesas", TransactionType.DESPESA),
]


def parse_transaction_type(value: Optional[str | TransactionType]) -> TransactionType:
    """Parse a RECEITA/DESPESA value.

    Raises:
        ValidationError: If the value is missing or not a known type
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Transaction type is required (RECEITA or DESPESA)")
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid transaction type '{value}'. Expected RECEITA or DESPESA")


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str, tipo: str | TransactionType) -> int:
        """Create a category.

        Args:
            name: Category name (unique)
            tipo: RECEITA or DESPESA

        Returns:
            Category ID

        Raises:
            ValidationError: If name is blank or type is invalid
            ConflictError: If a category with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        category_type = parse_transaction_type(tipo)

        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(name=name, tipo=category_type)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def require_category(self, category_id: int) -> CategoryEntity:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def resolve_category(self, category: str | int) -> CategoryEntity:
        """Resolve a category name or ID.

        Raises:
            NotFoundError: If no category matches
        """
        if isinstance(category, int) or category.strip().isdigit():
            return self.require_category(int(category))
        found = self.db.get_category_by_name(category)
        if found is None:
            raise NotFoundError(f"Category '{category}' not found")
        return found

    def list_categories(self, tipo: Optional[str | TransactionType] = None) -> list[CategoryEntity]:
        """List categories.

        Args:
            tipo: Optional RECEITA/DESPESA filter

        Returns:
            List of category entities ordered by name
        """
        category_type = parse_transaction_type(tipo) if tipo is not None else None
        return self.db.list_categories(tipo=category_type)

    def create_default_categories(self) -> int:
        """Create the default category set, skipping names that exist.

        Returns:
            Number of categories created
        """
        created = 0
        for name, tipo in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is None:
                self.db.create_category(name=name, tipo=tipo)
                created += 1
        return created
