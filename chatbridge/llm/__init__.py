"""
LLM module - OpenWebUI client and response normalization.
"""
from chatbridge.llm.client import OpenWebUIClient, ClientConfig
from chatbridge.llm.formatter import format_sources
from chatbridge.llm.normalizer import normalize_response, extract_content, extract_sources
from chatbridge.llm.results import NormalizedResult, SourceRecord

__all__ = [
    "OpenWebUIClient",
    "ClientConfig",
    "format_sources",
    "normalize_response",
    "extract_content",
    "extract_sources",
    "NormalizedResult",
    "SourceRecord",
]
