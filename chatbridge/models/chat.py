"""
Request and Response models for the Chat and Health APIs.

These Pydantic models define the contract between client and server.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /chat endpoint.

    Attributes:
        message: The user's question.
        collection_id: Knowledge collection to search; server default if omitted.
        model: Model override for this request.
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="The user's question",
        examples=["What topics does the syllabus cover?"]
    )
    collection_id: Optional[str] = Field(
        default=None,
        description="Knowledge collection to search"
    )
    model: Optional[str] = Field(
        default=None,
        description="Model identifier override"
    )


class SourceModel(BaseModel):
    """A source reference returned with an answer."""
    title: str = ""
    url: str = ""
    snippet: str = ""
    score: float = 0.0
    author: Optional[str] = None
    page: Optional[str] = None
    collectionId: Optional[str] = None
    collectionType: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ChatResponse(BaseModel):
    """Response model for the /chat endpoint."""
    content: str = Field(
        ...,
        description="The assistant's answer, or a bracketed error string"
    )
    sources: List[SourceModel] = Field(
        default_factory=list,
        description="Deduplicated sources in the order they were found"
    )
    formatted_sources: List[str] = Field(
        default_factory=list,
        description="Sources rendered for display, numbered from 1"
    )
    status: Optional[int] = Field(
        default=None,
        description="Upstream HTTP status, set only on error results"
    )
    error: Optional[str] = Field(
        default=None,
        description="Error detail, set only on error results"
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    checks: Optional[Dict[str, bool]] = None


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
