"""
Models module - Pydantic schemas for request/response validation.
"""
from chatbridge.models.chat import (
    ChatRequest,
    ChatResponse,
    SourceModel,
    HealthResponse,
    ErrorResponse,
)
from chatbridge.models.user import UserCreate, UserResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "SourceModel",
    "HealthResponse",
    "ErrorResponse",
    "UserCreate",
    "UserResponse",
]
