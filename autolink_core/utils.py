"""Utility functions for autolink."""

import os
import logging
import fnmatch
from typing import List, Optional, Iterable, Union
from pathlib import Path

from autolink_core.constants import MARKDOWN_EXTENSIONS

logger = logging.getLogger(__name__)

# --- File I/O ---

def read_text_file(file_path: Union[str, Path]) -> Optional[str]:
    """Read a UTF-8 text file, returning None on failure."""
    try:
        with open(file_path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file '{file_path}': {e}")
        return None

def write_text_file(file_path: Union[str, Path], content: str) -> bool:
    """Write a UTF-8 text file."""
    try:
        with open(file_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        return True
    except OSError as e:
        logger.error(f"Error writing file '{file_path}': {e}")
        return False

# --- File System Utilities ---

def is_excluded(path: str, root: str, exclude_patterns: List[str]) -> bool:
    """Check a path (relative to root, or by basename) against glob patterns."""
    relative_path = os.path.relpath(path, root)
    basename = os.path.basename(path)
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(basename, pattern):
            return True
    return False

def scandir_recursive(
    root: str,
    exclude_patterns: Optional[List[str]] = None,
    quiet: bool = False,
    base: Optional[str] = None
) -> List[str]:
    """
    Recursively scan a directory, skipping entries that match any exclude pattern.

    Args:
        root: Directory to scan
        exclude_patterns: List of glob patterns to exclude
        quiet: Whether to suppress debug logging
        base: Directory that relative exclude patterns refer to (defaults to root)
    """
    exclude_patterns = exclude_patterns or []
    base = base or root
    paths = []

    if not quiet:
        logger.debug(f"Scanning directory: {root}")

    try:
        with os.scandir(root) as it:
            for entry in sorted(it, key=lambda e: e.name):
                if is_excluded(entry.path, base, exclude_patterns):
                    if not quiet:
                        logger.debug(f"Excluding {entry.path}")
                    continue
                if entry.is_file():
                    paths.append(entry.path)
                elif entry.is_dir():
                    paths.extend(scandir_recursive(entry.path, exclude_patterns, quiet, base))
    except PermissionError as e:
        logger.warning(f"Permission error accessing directory: {root}. Skipping. Error: {e}")
    except OSError as e:
        logger.error(f"OS error while scanning directory: {root}. Skipping. Error: {e}")
    return paths

def find_note_files(
    paths: Iterable[Union[str, Path]],
    exclude_patterns: Optional[List[str]] = None,
    extensions: Optional[List[str]] = None,
    quiet: bool = False
) -> List[str]:
    """
    Expand files and directories into the list of note files to convert.

    Files named explicitly are always kept; directories are scanned and
    filtered by extension and exclude patterns.
    """
    extensions = extensions or MARKDOWN_EXTENSIONS
    found: List[str] = []
    for path in paths:
        path = str(path)
        if os.path.isdir(path):
            for candidate in scandir_recursive(path, exclude_patterns, quiet):
                if os.path.splitext(candidate)[1].lower() in extensions:
                    found.append(candidate)
        elif os.path.isfile(path):
            found.append(path)
        else:
            logger.warning(f"Path not found: {path}")
    # Keep order, drop duplicates
    seen = set()
    return [p for p in found if not (p in seen or seen.add(p))]
