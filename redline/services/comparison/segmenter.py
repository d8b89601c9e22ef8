"""
Paragraph Segmenter
===================

Splits a document into paragraph segments on blank-line boundaries and
records where each paragraph sits in the source text.
"""

import re
from typing import List

from .models import TextSegment

# One or more blank lines (whitespace-only lines count as blank)
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def segment_text(text: str, prefix: str = "seg") -> List[TextSegment]:
    """
    Split text into paragraphs.

    Whitespace-only paragraphs are dropped and every kept paragraph is
    stripped. start_index/end_index delimit the stripped paragraph in the
    source, so text[start_index:end_index] == segment.text.

    Args:
        text: Source document
        prefix: Id prefix, e.g. "orig" or "new"

    Returns:
        Segments in document order with ids "<prefix>_<paragraph_number>"
    """
    segments: List[TextSegment] = []
    if not text:
        return segments

    cursor = 0
    boundaries = [(m.start(), m.end()) for m in PARAGRAPH_BREAK.finditer(text)]
    boundaries.append((len(text), len(text)))

    for break_start, break_end in boundaries:
        raw = text[cursor:break_start]
        stripped = raw.strip()
        if stripped:
            start = cursor + (len(raw) - len(raw.lstrip()))
            end = start + len(stripped)
            paragraph_number = len(segments) + 1
            segments.append(TextSegment(
                id=f"{prefix}_{paragraph_number}",
                text=stripped,
                start_index=start,
                end_index=end,
                line_number=text.count("\n", 0, start) + 1,
                paragraph_number=paragraph_number,
            ))
        cursor = break_end

    return segments
