"""
Request and Response models for the Users API.
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Request model for creating a user."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class UserResponse(BaseModel):
    """A user as returned by the API."""
    id: int
    name: str
    email: str
    created_at: Optional[Union[datetime, str]] = None
