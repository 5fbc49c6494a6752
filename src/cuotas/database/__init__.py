"""Database layer for cuotas application."""

from cuotas.database.base import Database
from cuotas.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
