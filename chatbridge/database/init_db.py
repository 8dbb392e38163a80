"""
Database Initialization - Create the Users table.
"""
from typing import Optional

from chatbridge.core.logging_config import get_logger
from chatbridge.database.connection import DatabaseConnection, get_database
from chatbridge.database.models import Base

logger = get_logger(__name__)


def init_user_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create the Users table if it doesn't exist.

    Args:
        db: Connection to use; defaults to the shared connection

    Returns:
        True if tables were created successfully
    """
    db = db or get_database()
    try:
        Base.metadata.create_all(db.engine)
        logger.info("User tables initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize user tables: {e}")
        raise


if __name__ == "__main__":
    # Allow running directly to create tables
    print("Initializing user tables...")
    init_user_tables()
    print("Done!")
