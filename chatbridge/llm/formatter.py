"""
Source Formatter - Render SourceRecords for display.

Produces one markdown-ish string per source, numbered from 1:

    1. **Title** by Author (Page 2)
       URL: https://...
       Snippet text...
       Relevance: 0.912
"""
from typing import List, Sequence

from chatbridge.llm.results import SourceRecord

SNIPPET_DISPLAY_LIMIT = 200


def format_source(index: int, source: SourceRecord) -> str:
    """Format a single source; fields that are absent are left out."""
    header = f"{index}."
    if source.title:
        header += f" **{source.title}**"
    if source.author:
        header += f" by {source.author}"
    if source.page:
        header += f" ({source.page})"

    lines = [header]
    if source.url:
        lines.append(f"   URL: {source.url}")
    if source.snippet:
        snippet = source.snippet
        if len(snippet) > SNIPPET_DISPLAY_LIMIT:
            snippet = snippet[:SNIPPET_DISPLAY_LIMIT] + "..."
        lines.append(f"   {snippet}")
    if source.score > 0:
        lines.append(f"   Relevance: {source.score:.3f}")

    return "\n".join(lines)


def format_sources(sources: Sequence[SourceRecord]) -> List[str]:
    """
    Format sources for display, keeping their order.

    Args:
        sources: Sources as returned by the normalizer

    Returns:
        One formatted string per source, numbered from 1
    """
    return [format_source(i, source) for i, source in enumerate(sources, start=1)]
