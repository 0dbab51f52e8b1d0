"""Constants for the autolink package."""

import re

# Protected regions: fenced code, inline code, and frontmatter at the very start
PROTECTION_RE = re.compile(r'(```[\s\S]*?```|`[^`\n]+`|^---\n[\s\S]*?\n---)')

# Built-in detection patterns, applied in this order
PASCAL_CASE_RE = re.compile(r'\b([A-Z][a-z]+(?:[A-Z][a-z]+)+)\b', re.ASCII)
CAMEL_CASE_RE = re.compile(r'\b([a-z]+(?:[A-Z][a-z]+)+)\b', re.ASCII)
SNAKE_CASE_RE = re.compile(r'\b([A-Za-z]+_[A-Za-z_]+)\b', re.ASCII)

# Smart alias helpers
CASE_TRANSITION_RE = re.compile(r'([a-z])([A-Z])')

# Reference markers
LINK_OPEN = "[["
LINK_CLOSE = "]]"
WIKILINK_ALL_RE = re.compile(r'\[\[([^|\]]+)(?:\|([^\]]+))?\]\]')

# Pattern names
PATTERN_PASCAL = "pascal"
PATTERN_CAMEL = "camel"
PATTERN_SNAKE = "snake"
PATTERN_CUSTOM = "custom"

# File extensions
MARKDOWN_EXTENSIONS = [".md", ".markdown"]

# Default configuration values
DEFAULT_CONFIG_PATH = "~/.config/autolink/config.yaml"
DEFAULT_NOTES_DIR = "~/notes"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_EXCLUDE_PATTERNS = [".git", ".obsidian", "node_modules"]

# Linker defaults
DEFAULT_LIVE_MODE = True
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_MIN_LENGTH = 4
DEFAULT_SMART_ALIASING = True
DEFAULT_IGNORE_LIST = ["HTTP", "JSON", "NASA", "iOS", "macOS"]
