"""
Response Normalizer - Consistent content + sources from any chat response.

Chat completion APIs (OpenAI-compatible servers, OpenWebUI, RAG proxies)
return the answer text and its citations in different places. This module
turns one decoded response body into a NormalizedResult:

1. Content extraction - an ordered table of response shapes, first match wins
2. Source scanning - a fixed list of locations, each parsed independently
3. Deduplication - first occurrence of each source wins

Every function is a pure function of its input and safe to call from
multiple threads.
"""
import json
from typing import Any, Callable, Dict, List, Tuple

from chatbridge.core.logging_config import get_logger
from chatbridge.llm.results import NormalizedResult, SourceRecord
from chatbridge.llm.sources import (
    deduplicate_sources,
    extract_function_call_sources,
    parse_openwebui_sources,
    parse_source_field,
)

logger = get_logger(__name__)

PARSE_ERROR_CONTENT = "[ERROR: Failed to parse API response]"

# Citation-like fields checked at the top level and on each choice message
SOURCE_FIELDS = (
    "citations",
    "references",
    "links",
    "source_documents",
    "source_links",
    "metadata",
)

CALL_FIELDS = ("function_call", "tool_calls")

# Retrieval context fields; only the first one present is used
CONTEXT_FIELDS = ("context", "retrieved_docs")


def _serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _as_text(value: Any) -> str:
    """Strings are trimmed; structured values (e.g. content parts) become JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return _serialize(value).strip()


# ============================================================
# Content extraction
# ============================================================

def _has_choices(raw: Dict[str, Any]) -> bool:
    choices = raw.get("choices")
    return isinstance(choices, list) and len(choices) > 0


def _content_from_choices(raw: Dict[str, Any]) -> str:
    choice = raw["choices"][0]
    if not isinstance(choice, dict):
        return _as_text(choice)
    message = choice.get("message")
    if isinstance(message, dict) and message.get("content") is not None:
        return _as_text(message["content"])
    if "text" in choice:
        return _as_text(choice["text"])
    return ""


def _has_response_string(raw: Dict[str, Any]) -> bool:
    return isinstance(raw.get("response"), str)


def _has_message(raw: Dict[str, Any]) -> bool:
    message = raw.get("message")
    return isinstance(message, str) or (isinstance(message, dict) and "content" in message)


def _content_from_message(raw: Dict[str, Any]) -> str:
    message = raw["message"]
    if isinstance(message, str):
        return _as_text(message)
    return _as_text(message["content"])


# (shape name, predicate, extractor); evaluated in order, first match wins
CONTENT_SHAPES: List[Tuple[str, Callable[[Dict[str, Any]], bool], Callable[[Dict[str, Any]], str]]] = [
    ("choices", _has_choices, _content_from_choices),
    ("response", _has_response_string, lambda raw: _as_text(raw["response"])),
    ("content", lambda raw: "content" in raw, lambda raw: _as_text(raw["content"])),
    ("message", _has_message, _content_from_message),
]


def extract_content(raw: Any) -> str:
    """
    Extract the answer text from a chat response.

    Recognized shapes, in priority order:
    1. ``choices[0].message.content`` or ``choices[0].text`` (OpenAI style)
    2. top-level ``response`` string (Ollama style)
    3. top-level ``content``
    4. top-level ``message`` as a string or ``{"content": ...}``

    An unrecognized shape is not an error: the whole document is
    serialized as the content and a warning is logged.

    Args:
        raw: Decoded JSON response body

    Returns:
        Trimmed content string
    """
    if isinstance(raw, dict):
        for name, matches, extract in CONTENT_SHAPES:
            if matches(raw):
                logger.debug(f"Response content matched shape '{name}'")
                return extract(raw)
        shape = f"keys={sorted(raw.keys())}"
    else:
        shape = f"type={type(raw).__name__}"

    logger.warning(f"Unrecognized response shape ({shape}); using raw response as content")
    return _serialize(raw).strip()


# ============================================================
# Source scanning
# ============================================================

def _scan(location: str, parser: Callable[[Any], List[SourceRecord]], value: Any) -> List[SourceRecord]:
    """Run one parser over one location; a failure yields no sources."""
    try:
        return parser(value)
    except Exception as e:
        logger.warning(f"Failed to extract sources from '{location}': {e}")
        return []


def _scan_choice(index: int, choice: Any) -> List[SourceRecord]:
    if not isinstance(choice, dict):
        return []

    records: List[SourceRecord] = []
    message = choice.get("message")
    if not isinstance(message, dict):
        message = {}

    for field in SOURCE_FIELDS:
        if field in message:
            records.extend(_scan(f"choices[{index}].message.{field}", parse_source_field, message[field]))

    for field in CALL_FIELDS:
        # OpenAI puts calls on the message; some proxies put them on the choice
        payload = message.get(field) or choice.get(field)
        if payload:
            records.extend(_scan(f"choices[{index}].{field}", extract_function_call_sources, payload))

    return records


def extract_sources(raw: Any) -> List[SourceRecord]:
    """
    Collect sources from every known location in a chat response.

    Locations are scanned in this order, which decides which duplicate
    survives deduplication:
    1. top-level ``sources`` (OpenWebUI source groups)
    2. top-level citation fields (``citations``, ``references``, ...)
    3. each choice's message citation fields and function/tool calls
    4. top-level ``context`` or else ``retrieved_docs``

    Note that OpenWebUI's ``sources`` and a top-level ``metadata`` field
    may describe the same documents; both are scanned and deduplication
    collapses the overlap.

    Args:
        raw: Decoded JSON response body

    Returns:
        Deduplicated SourceRecords in first-seen order
    """
    if not isinstance(raw, dict):
        return []

    records: List[SourceRecord] = []

    if "sources" in raw:
        records.extend(_scan("sources", parse_openwebui_sources, raw["sources"]))

    for field in SOURCE_FIELDS:
        if field in raw:
            records.extend(_scan(field, parse_source_field, raw[field]))

    choices = raw.get("choices")
    if isinstance(choices, list):
        for index, choice in enumerate(choices):
            records.extend(_scan_choice(index, choice))

    for field in CONTEXT_FIELDS:
        if field in raw:
            records.extend(_scan(field, parse_source_field, raw[field]))
            break

    return deduplicate_sources(records)


# ============================================================
# Entry point
# ============================================================

def normalize_response(raw: Any) -> NormalizedResult:
    """
    Normalize a decoded chat completion response.

    Never raises: if extraction fails unexpectedly, the result carries
    PARSE_ERROR_CONTENT and no sources.

    Example:
        >>> result = normalize_response({"message": "hello"})
        >>> result.content, result.sources
        ('hello', ())
    """
    try:
        content = extract_content(raw)
        sources = extract_sources(raw)
    except Exception as e:
        logger.error(f"Failed to parse API response: {e}")
        return NormalizedResult(content=PARSE_ERROR_CONTENT, sources=(), raw_response=raw)

    logger.info(f"Normalized response: content_length={len(content)}, sources={len(sources)}")
    return NormalizedResult(content=content, sources=tuple(sources), raw_response=raw)
