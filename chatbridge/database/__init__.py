"""
Database module - Users database access layer.
"""
from chatbridge.database.connection import DatabaseConnection, get_database
from chatbridge.database.models import User, Base
from chatbridge.database.init_db import init_user_tables

__all__ = [
    "DatabaseConnection",
    "get_database",
    "User",
    "Base",
    "init_user_tables",
]
