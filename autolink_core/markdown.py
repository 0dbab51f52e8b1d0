"""
Markdown helpers for autolink.

Used to report what a conversion did:
- Counting the links a conversion added
"""

from autolink_core.constants import WIKILINK_ALL_RE
from autolink_core.protector import split


def count_wikilinks(body: str) -> int:
    """Count wikilinks outside protected regions (duplicates included)."""
    return sum(
        len(WIKILINK_ALL_RE.findall(segment.text))
        for segment in split(body)
        if not segment.protected
    )


def links_added(before: str, after: str) -> int:
    """Number of wikilinks a conversion introduced."""
    return count_wikilinks(after) - count_wikilinks(before)
