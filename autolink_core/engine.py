"""Safe text conversion: protection split, rewrite, rejoin."""

import logging
from typing import Optional

from autolink_core.config import LinkerConfig
from autolink_core.models import Segment
from autolink_core.protector import split, join
from autolink_core.rewriter import Rewriter

logger = logging.getLogger(__name__)


def segment_cursor(segment: Segment, cursor: Optional[int]) -> Optional[int]:
    """
    Translate a cursor column into the segment's own coordinates.

    Returns None when no cursor is given. A cursor left of the segment maps
    to -1 and one right of it maps past its end, so neither touches a match.
    """
    if cursor is None:
        return None
    if cursor < segment.start:
        return -1
    if cursor > segment.end:
        return len(segment.text) + 1
    return cursor - segment.start


def convert_with(rewriter: Rewriter, text: str, cursor: Optional[int] = None) -> str:
    """Convert text with an already assembled rewriter."""
    segments = []
    for segment in split(text):
        if segment.protected or not segment.text:
            segments.append(segment)
            continue
        rewritten = rewriter.rewrite(segment.text, segment_cursor(segment, cursor))
        segments.append(Segment(text=rewritten, protected=False, start=segment.start))
    return join(segments)


def convert_text(text: str, config: LinkerConfig, cursor: Optional[int] = None) -> str:
    """
    Convert eligible words in text to wikilinks, leaving protected regions alone.

    Args:
        text: Whole document (batch) or a single line (live)
        config: Linker settings
        cursor: Cursor column within the line for live conversion, None for batch

    Returns:
        The converted text (identical to the input when nothing matched)
    """
    rewriter = Rewriter(config)
    if rewriter.custom_pattern_error:
        logger.debug(f"Custom pattern disabled: {rewriter.custom_pattern_error}")
    return convert_with(rewriter, text, cursor)
