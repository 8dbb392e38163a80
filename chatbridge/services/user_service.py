"""
User Service - Business logic for the /users endpoints.

Queries are plain parameterized SQL executed through the shared
DatabaseConnection; rows come back as dictionaries ready for JSON.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from chatbridge.core.exceptions import DatabaseError, ValidationError
from chatbridge.core.logging_config import LoggerMixin
from chatbridge.database.connection import DatabaseConnection, get_database

SELECT_ALL_USERS = "SELECT * FROM Users"
INSERT_USER = "INSERT INTO Users (name, email, created_at) VALUES (:name, :email, :created_at)"


class UserService(LoggerMixin):
    """
    Reads and creates users.

    Example:
        >>> service = UserService()
        >>> service.add("Ada", "ada@example.com")
        {'id': 1, 'name': 'Ada', 'email': 'ada@example.com', 'created_at': '...'}
        >>> len(service.get_all())
        1
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Retrieve all users.

        Raises:
            DatabaseError: If the query fails
        """
        try:
            with self.db.get_session() as session:
                result = session.execute(text(SELECT_ALL_USERS))
                users = [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve users: {e}")
            raise DatabaseError(str(e)) from e

        self.logger.info(f"Retrieved {len(users)} users")
        return users

    def add(self, name: str, email: str) -> Dict[str, Any]:
        """
        Create a user.

        Args:
            name: Display name
            email: Unique email address

        Returns:
            The created user, including its id

        Raises:
            ValidationError: If the email is already registered
            DatabaseError: If the insert fails for any other reason
        """
        params = {"name": name, "email": email, "created_at": datetime.utcnow()}
        try:
            with self.db.get_session() as session:
                result = session.execute(text(INSERT_USER), params)
                user_id = result.lastrowid
        except IntegrityError as e:
            self.logger.warning(f"Rejected duplicate user: {email}")
            raise ValidationError("A user with this email already exists", field="email") from e
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to create user: {e}")
            raise DatabaseError(str(e)) from e

        user = {"id": user_id, **params}
        user["created_at"] = params["created_at"].isoformat()
        self.logger.info(f"Created user: id={user_id}")
        return user


# Module-level instance (singleton pattern)
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    """Get or create the user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
