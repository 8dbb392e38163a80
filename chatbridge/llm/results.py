"""
Normalized result types for chat completion responses.

SourceRecord describes one retrieved document or citation; NormalizedResult
bundles the extracted answer text with its sources and the raw response.
Both are created fresh for every normalization call and are immutable;
source metadata is copied so a result never aliases the raw response.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class SourceRecord:
    """
    A single source reference extracted from a chat response.

    Attributes:
        title: Document title (may be empty)
        url: Link or handle for the document (may be empty)
        snippet: Excerpt of the retrieved text (may be empty)
        score: Relevance/similarity score, passed through or derived
               from a retrieval distance. Defaults to 0.
        author: Document author, if known
        page: Human-readable page reference, e.g. "Page 2"
        collection_id: Knowledge collection the document came from
        collection_type: Type of that collection
        metadata: Raw per-document metadata from the retrieval system
    """
    title: str = ""
    url: str = ""
    snippet: str = ""
    score: float = 0.0
    author: Optional[str] = None
    page: Optional[str] = None
    collection_id: Optional[str] = None
    collection_type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def has_content(self) -> bool:
        """True if at least one of title, url or snippet is non-empty."""
        return bool(self.title or self.url or self.snippet)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire shape, omitting absent optional fields."""
        data: Dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "score": self.score,
        }
        optional = {
            "author": self.author,
            "page": self.page,
            "collectionId": self.collection_id,
            "collectionType": self.collection_type,
            "metadata": self.metadata,
        }
        data.update({key: value for key, value in optional.items() if value})
        return data


@dataclass(frozen=True)
class NormalizedResult:
    """
    Result of normalizing one chat completion response.

    status and error are only set on error-shaped results built by the
    client when the request itself failed.
    """
    content: str
    sources: Tuple[SourceRecord, ...] = ()
    raw_response: Any = None
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "content": self.content,
            "sources": [source.to_dict() for source in self.sources],
            "raw_response": self.raw_response,
        }
        if self.status is not None:
            data["status"] = self.status
        if self.error is not None:
            data["error"] = self.error
        return data


def record_fingerprint(record: SourceRecord) -> Dict[str, Any]:
    """Plain-dict view of every field, used for structural hashing."""
    return asdict(record)
