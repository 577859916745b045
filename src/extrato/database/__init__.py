"""Database layer for extrato application."""

from extrato.database.base import Database
from extrato.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
