"""Search box parsing: free text plus an optional ``tag:`` clause.

Supported forms::

    tag:work roadmap          -> text="roadmap", tag="work"
    tag:"deep work" plan      -> text="plan", tag="deep work"
    TAG: Work                 -> text="", tag="Work"

The keyword is case-insensitive; the value keeps its case. Only the first
clause is honoured, later ones stay in the free text.
"""

from __future__ import annotations

import re
from typing import Optional

from notes_core.models import ParsedQuery

# A quoted value wins over the bare-token form; tag:"" is an empty value.
# The keyword boundary is ASCII-only, so "étag:x" still holds a clause.
_TAG_CLAUSE = re.compile(r'(?<![A-Za-z0-9_])tag:\s*(?:"([^"]*)"|(\S+))', re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def parse_search_query(raw: Optional[str]) -> ParsedQuery:
    """Split *raw* search input into free text and a tag filter."""
    query = (raw or "").strip()
    if not query:
        return ParsedQuery(text="", tag=None)

    match = _TAG_CLAUSE.search(query)
    if match is None:
        return ParsedQuery(text=query, tag=None)

    quoted, bare = match.group(1), match.group(2)
    value = (quoted if quoted is not None else bare or "").strip()

    remainder = f"{query[: match.start()]} {query[match.end():]}"
    text = _WHITESPACE.sub(" ", remainder).strip()
    return ParsedQuery(text=text, tag=value or None)
