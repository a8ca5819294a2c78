"""Split text into highlighted and plain segments for rendering.

The output is plain data, so any front end can render it without the core
producing markup. Joining every segment's text gives back the input.
"""

from __future__ import annotations

import re
from typing import Optional

from notes_core.models import HighlightSegment


def highlight(text: Optional[str], needle: Optional[str]) -> list[HighlightSegment]:
    """Mark case-insensitive literal occurrences of *needle* in *text*.

    Example::

        highlight("Hello world", "wor")
        # [("Hello ", False), ("wor", True), ("ld", False)]
    """
    source = text or ""
    query = (needle or "").strip()
    if not query:
        return [HighlightSegment(text=source, highlight=False)]

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    segments: list[HighlightSegment] = []
    cursor = 0

    for match in pattern.finditer(source):
        start, end = match.span()
        if start > cursor:
            segments.append(HighlightSegment(text=source[cursor:start], highlight=False))
        segments.append(HighlightSegment(text=match.group(0), highlight=True))
        cursor = end

    if cursor < len(source):
        segments.append(HighlightSegment(text=source[cursor:], highlight=False))

    return segments or [HighlightSegment(text=source, highlight=False)]
