"""
Source parsing - Turn loosely-shaped citation data into SourceRecords.

Upstream chat APIs report retrieved documents in many overlapping shapes:
- OpenWebUI "source groups" with parallel document/metadata/distance arrays
- Lists of citation objects or bare URLs
- A single citation object or URL string
- Sources embedded in function/tool call arguments

Every parser here is tolerant: a malformed piece is logged and skipped,
the rest of the input is still parsed.
"""
import copy
import hashlib
import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from chatbridge.core.logging_config import get_logger
from chatbridge.llm.results import SourceRecord, record_fingerprint

logger = get_logger(__name__)

# OpenWebUI snippets are cut here before display
OPENWEBUI_SNIPPET_LIMIT = 300

URL_PREFIXES = ("http", "www")

DEDUP_SEPARATOR = "|"


def _first_text(data: Dict[str, Any], keys: Sequence[str]) -> str:
    """
    Return the first non-empty scalar value among keys, as a string.

    Nested objects and lists are skipped rather than stringified.
    """
    for key in keys:
        value = data.get(key)
        if value is None or isinstance(value, (dict, list, bool)):
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _first_number(data: Dict[str, Any], keys: Sequence[str]) -> float:
    """Return the first numeric value among keys, else 0."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return 0.0


def _as_list(value: Any) -> List[Any]:
    """Absent -> [], list -> itself, anything else -> [value]."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


# ============================================================
# OpenWebUI source groups
# ============================================================

def _parse_source_group(group: Dict[str, Any]) -> List[SourceRecord]:
    """Parse one collection's retrieval bundle."""
    source_info = group.get("source")
    if not isinstance(source_info, dict):
        source_info = {}
    collection_id = _first_text(source_info, ("id",))
    collection_type = _first_text(source_info, ("type",))

    documents = _as_list(group.get("document"))
    metadatas = _as_list(group.get("metadata"))
    distances = _as_list(group.get("distances"))

    records = []
    for i, document in enumerate(documents):
        meta = metadatas[i] if i < len(metadatas) else {}
        if not isinstance(meta, dict):
            meta = {}
        distance = distances[i] if i < len(distances) else None

        page = meta.get("page")
        text = "" if document is None else str(document).strip()

        score = 0.0
        if distance is not None:
            try:
                score = 1 - float(distance)
            except (TypeError, ValueError):
                logger.debug(f"Ignoring non-numeric distance: {distance!r}")

        record = SourceRecord(
            title=_first_text(meta, ("title", "ti", "name")),
            url=_first_text(meta, ("url", "hdl")),
            snippet=_truncate(text, OPENWEBUI_SNIPPET_LIMIT),
            score=score,
            author=_first_text(meta, ("author", "au")),
            page=f"Page {page}" if page not in (None, "") else "",
            collection_id=collection_id,
            collection_type=collection_type,
            metadata=copy.deepcopy(meta),
        )
        if record.has_content():
            records.append(record)

    return records


def parse_openwebui_sources(groups: Any) -> List[SourceRecord]:
    """
    Parse OpenWebUI's top-level ``sources`` array.

    Each group looks like::

        {
            "source": {"id": "<collection id>", "type": "collection"},
            "document": ["text", ...],
            "metadata": [{"title": ..., "page": ...}, ...],
            "distances": [0.12, ...]
        }

    The three arrays may have different lengths; missing metadata is
    treated as ``{}`` and a missing distance gives a score of 0.
    Distances are dissimilarities, so score = 1 - distance.

    Args:
        groups: List of source groups (a single group object is accepted)

    Returns:
        SourceRecords with a title, snippet or url, in input order
    """
    records: List[SourceRecord] = []

    for index, group in enumerate(_as_list(groups)):
        if not isinstance(group, dict):
            logger.debug(f"Skipping non-object source group at index {index}")
            continue
        try:
            records.extend(_parse_source_group(group))
        except Exception as e:
            logger.warning(f"Failed to parse source group {index}: {e}")

    return records


# ============================================================
# Generic citation fields
# ============================================================

def _record_from_mapping(item: Dict[str, Any]) -> Optional[SourceRecord]:
    """Map a citation-like object onto a SourceRecord via field aliases."""
    record = SourceRecord(
        title=_first_text(item, ("title",)),
        url=_first_text(item, ("url", "link", "source")),
        snippet=_first_text(item, ("snippet", "content", "text")),
        score=_first_number(item, ("score", "relevance")),
        author=_first_text(item, ("author",)) or None,
        page=_first_text(item, ("page",)) or None,
    )
    if record.url or record.title:
        return record
    return None


def parse_source_field(value: Any) -> List[SourceRecord]:
    """
    Parse the value of a citation-like field of unknown shape.

    Accepted shapes:
    - list: objects are mapped via field aliases, strings become url-only
      records; other element types are ignored
    - object: mapped via field aliases
    - string: a url-only record, but only if it looks like a URL

    Alias rules: url <- url | link | source, snippet <- snippet | content |
    text, score <- score | relevance (default 0). A record needs a url or a
    title to be kept; a bare snippet is not enough.

    Args:
        value: Raw JSON value found at a source-like field

    Returns:
        Parsed SourceRecords (possibly empty)
    """
    records: List[SourceRecord] = []

    if isinstance(value, list):
        for index, item in enumerate(value):
            try:
                if isinstance(item, dict):
                    record = _record_from_mapping(item)
                    if record:
                        records.append(record)
                elif isinstance(item, str) and item.strip():
                    records.append(SourceRecord(url=item.strip()))
            except Exception as e:
                logger.debug(f"Skipping unparseable source item {index}: {e}")

    elif isinstance(value, dict):
        record = _record_from_mapping(value)
        if record:
            records.append(record)

    elif isinstance(value, str):
        text = value.strip()
        if text.startswith(URL_PREFIXES):
            records.append(SourceRecord(url=text))

    return records


# ============================================================
# Function / tool calls
# ============================================================

def _call_arguments(call: Dict[str, Any]) -> Any:
    """Arguments live on the call itself or on its nested function object."""
    if "arguments" in call:
        return call["arguments"]
    function = call.get("function")
    if isinstance(function, dict):
        return function.get("arguments")
    return None


def extract_function_call_sources(payload: Any) -> List[SourceRecord]:
    """
    Extract sources passed as arguments to a function or tool call.

    Args:
        payload: A single call object or a list of them. ``arguments`` may
                 be a JSON string or an already-decoded object.

    Returns:
        Sources found under ``arguments.sources``; calls with malformed
        JSON arguments are skipped.
    """
    records: List[SourceRecord] = []

    for call in _as_list(payload):
        if not isinstance(call, dict):
            continue

        arguments = _call_arguments(call)
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except ValueError as e:
                logger.warning(f"Skipping call with malformed arguments JSON: {e}")
                continue

        if isinstance(arguments, dict) and "sources" in arguments:
            records.extend(parse_source_field(arguments["sources"]))

    return records


# ============================================================
# Deduplication
# ============================================================

def dedup_key(record: SourceRecord) -> str:
    """
    Build the identity key for a source.

    Present values of url, title, collection_id and page are joined in
    that order. A record with none of them falls back to a hash of all
    its fields.
    """
    parts = [
        record.url,
        record.title,
        record.collection_id or "",
        record.page or "",
    ]
    key = DEDUP_SEPARATOR.join(str(part) for part in parts if part)
    if key:
        return key

    dumped = json.dumps(record_fingerprint(record), sort_keys=True, default=str)
    return hashlib.md5(dumped.encode("utf-8")).hexdigest()


def deduplicate_sources(records: Iterable[SourceRecord]) -> List[SourceRecord]:
    """
    Drop sources whose key was already seen, keeping first-seen order.

    No sorting is applied; the order in which sources were found is kept.
    """
    seen = set()
    unique: List[SourceRecord] = []

    for record in records:
        key = dedup_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)

    return unique
