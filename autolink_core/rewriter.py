"""
Pattern detection and link rewriting.

This module turns identifier-like words (PascalCase, camelCase, snake_case
and an optional custom regular expression) into wikilinks:
- Assembling the active patterns from the linker settings
- Filtering each match (length, ignore list, cursor, existing links)
- Building plain or aliased wikilinks
"""

import re
import logging
from typing import List, Optional, Tuple, Pattern

from autolink_core.config import LinkerConfig
from autolink_core.constants import (
    PASCAL_CASE_RE,
    CAMEL_CASE_RE,
    SNAKE_CASE_RE,
    CASE_TRANSITION_RE,
    LINK_OPEN,
    LINK_CLOSE,
    PATTERN_PASCAL,
    PATTERN_CAMEL,
    PATTERN_SNAKE,
    PATTERN_CUSTOM
)
from autolink_core.models import CandidateMatch

logger = logging.getLogger(__name__)


def clean_name(word: str) -> str:
    """
    Derive a human-readable form of an identifier.

    Underscores become spaces and a space is inserted at every
    lowercase-to-uppercase transition.

    Args:
        word: The raw matched word

    Returns:
        The cleaned display form
    """
    return CASE_TRANSITION_RE.sub(r'\1 \2', word.replace("_", " "))


def format_link(word: str, smart_aliasing: bool = True) -> str:
    """
    Build the wikilink for a matched word.

    Args:
        word: The raw matched word
        smart_aliasing: Whether to emit [[Clean Name|word]] when it differs

    Returns:
        A formatted wikilink string
    """
    if smart_aliasing:
        clean = clean_name(word)
        if clean != word:
            return f"[[{clean}|{word}]]"
    return f"[[{word}]]"


def is_inside_link(text_before: str) -> bool:
    """True if the text ends inside an unclosed [[...]] reference."""
    return text_before.count(LINK_OPEN) > text_before.count(LINK_CLOSE)


def compile_custom_pattern(source: str) -> Tuple[Optional[Pattern], Optional[str]]:
    """
    Compile a user supplied pattern.

    Returns:
        Tuple of (compiled pattern or None, error message or None)
    """
    if not source:
        return None, None
    try:
        return re.compile(source), None
    except re.error as e:
        logger.debug(f"Skipping invalid custom pattern {source!r}: {e}")
        return None, str(e)


class Rewriter:
    """Applies the enabled detection patterns to rewritable text."""

    def __init__(self, config: LinkerConfig):
        """
        Initialize a rewriter and assemble its patterns.

        Args:
            config: Linker settings (read only)
        """
        self.config = config
        self.custom_pattern_error: Optional[str] = None
        self.patterns: List[Tuple[str, Pattern]] = self._build_patterns()

    def _build_patterns(self) -> List[Tuple[str, Pattern]]:
        patterns = []
        if self.config.enable_pascal:
            patterns.append((PATTERN_PASCAL, PASCAL_CASE_RE))
        if self.config.enable_camel:
            patterns.append((PATTERN_CAMEL, CAMEL_CASE_RE))
        if self.config.enable_snake:
            patterns.append((PATTERN_SNAKE, SNAKE_CASE_RE))

        custom, error = compile_custom_pattern(self.config.custom_pattern)
        if custom is not None:
            patterns.append((PATTERN_CUSTOM, custom))
        self.custom_pattern_error = error
        return patterns

    def skip_reason(self, candidate: CandidateMatch, text: str, cursor: Optional[int] = None) -> Optional[str]:
        """
        Run the filter chain on a candidate match.

        Args:
            candidate: The match under consideration
            text: The pass input the match was found in
            cursor: Cursor column, only given for live conversion

        Returns:
            Name of the first failing check, or None if the match may be linked
        """
        if not candidate.text:
            return "empty"
        if len(candidate.text) < self.config.min_length:
            return "too-short"
        if candidate.text in self.config.ignore_list:
            return "ignored"
        if cursor is not None and candidate.touches(cursor):
            return "at-cursor"
        if is_inside_link(text[:candidate.start]):
            return "inside-link"
        return None

    def _rewrite_pass(self, name: str, pattern: Pattern, text: str, cursor: Optional[int]) -> str:
        def replace(match: re.Match) -> str:
            candidate = CandidateMatch(text=match.group(0), start=match.start(), pattern=name)
            reason = self.skip_reason(candidate, text, cursor)
            if reason:
                if reason != "empty":
                    logger.debug(f"Skipping {candidate.text!r} ({name}): {reason}")
                return candidate.text
            return format_link(candidate.text, self.config.smart_aliasing)

        return pattern.sub(replace, text)

    def rewrite(self, text: str, cursor: Optional[int] = None) -> str:
        """
        Rewrite all eligible matches in a rewritable segment.

        Each pattern scans the output of the previous one, so links created
        by an earlier pattern are seen by the nesting check of later ones.

        Args:
            text: Rewritable segment text
            cursor: Cursor column within the segment, or None for batch mode

        Returns:
            The rewritten text
        """
        result = text
        for name, pattern in self.patterns:
            result = self._rewrite_pass(name, pattern, result, cursor)
        return result
