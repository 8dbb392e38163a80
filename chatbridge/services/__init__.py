"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- No connection handling (that belongs in database/ and llm/)
"""
from chatbridge.services.chat_service import ChatService, get_chat_service
from chatbridge.services.user_service import UserService, get_user_service

__all__ = [
    "ChatService",
    "get_chat_service",
    "UserService",
    "get_user_service",
]
