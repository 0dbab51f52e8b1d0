"""
Protected region detection.

Splits text into rewritable and protected segments so that fenced code
blocks, inline code spans and a leading frontmatter block are never touched.
"""

from typing import List, Iterable

from autolink_core.constants import PROTECTION_RE
from autolink_core.models import Segment


def split(text: str) -> List[Segment]:
    """
    Split text into alternating rewritable and protected segments.

    Even positions of the split are rewritable, odd positions hold the
    protected regions with their delimiters. Joining the segment texts gives
    back the input unchanged.

    Args:
        text: Raw document or line text

    Returns:
        Ordered list of segments
    """
    segments: List[Segment] = []
    offset = 0
    for i, part in enumerate(PROTECTION_RE.split(text)):
        segments.append(Segment(text=part, protected=bool(i % 2), start=offset))
        offset += len(part)
    return segments


def join(segments: Iterable[Segment]) -> str:
    """Concatenate segment texts in order."""
    return "".join(segment.text for segment in segments)
