"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from extrato.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks EXTRATO_DB_PATH
            environment variable, then defaults to ~/.extrato/extrato.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("EXTRATO_DB_PATH")

    if database_path is None:
        # Default to ~/.extrato/extrato.db
        home = Path.home()
        db_dir = home / ".extrato"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "extrato.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database instance from a URL or a SQLite path.

    Args:
        database_url: Any SQLAlchemy URL. If None, checks EXTRATO_DATABASE_URL.
        database_path: SQLite file used when no URL is configured.

    Returns:
        SQLAlchemyDatabase instance (not yet connected)
    """
    if database_url is None:
        database_url = os.environ.get("EXTRATO_DATABASE_URL")

    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
