"""
Settings editing for the linker.

Turns text typed into a settings form or given on the command line into
typed LinkerConfig values. Bad numeric input is rejected without raising:
the setting keeps its value and the update reports False.
"""

import re
import logging
from typing import Any, Dict, List, Optional

from autolink_core.config import LinkerConfig

logger = logging.getLogger(__name__)

LEADING_INT_RE = re.compile(r'^\s*([+-]?\d+)')

NUMERIC_SETTINGS = {"debounce_ms", "min_length"}
BOOLEAN_SETTINGS = {"live_mode", "smart_aliasing", "enable_pascal", "enable_camel", "enable_snake"}
TRUE_VALUES = {"true", "yes", "on", "1"}
FALSE_VALUES = {"false", "no", "off", "0"}

# Labels and help shown by `autolink settings show`
SETTING_DESCRIPTIONS: Dict[str, str] = {
    "live_mode": "Convert patterns into links as you type.",
    "debounce_ms": "How long to wait after you stop typing before formatting links (ms).",
    "smart_aliasing": "Create clean names, e.g. CyberSecurity becomes [[Cyber Security|CyberSecurity]].",
    "min_length": "Ignore patterns shorter than this number of characters.",
    "ignore_list": "Comma-separated list of words to ignore.",
    "enable_pascal": "Link PascalCase words.",
    "enable_camel": "Link camelCase words.",
    "enable_snake": "Link snake_case words.",
    "custom_pattern": "Optional regular expression to link, e.g. \\b[A-Z]{2,}-\\d+\\b "
                      "(Jira tickets like PROJ-123) or @[A-Za-z0-9_]+ (@mentions).",
}


def parse_int(value: str) -> Optional[int]:
    """Parse the leading base-10 integer of a string, or None if there is none."""
    match = LEADING_INT_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_bool(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


def parse_ignore_list(value: str) -> List[str]:
    """Split a comma-separated list, trimming entries and dropping empty ones."""
    return [item.strip() for item in value.split(",") if item.strip()]


def format_setting(config: LinkerConfig, key: str) -> str:
    """Render a setting the way it is edited."""
    value = getattr(config, key)
    if key == "ignore_list":
        return ", ".join(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def update_setting(config: LinkerConfig, key: str, raw_value: str) -> bool:
    """
    Apply a text value to a setting.

    Args:
        config: Settings to update in place
        key: Setting name
        raw_value: The text as typed

    Returns:
        True if the setting was updated, False if the value was rejected

    Raises:
        KeyError: If key is not a known setting
    """
    if key not in LinkerConfig.model_fields:
        raise KeyError(key)

    value: Any
    if key in NUMERIC_SETTINGS:
        value = parse_int(raw_value)
    elif key in BOOLEAN_SETTINGS:
        value = parse_bool(raw_value)
    elif key == "ignore_list":
        value = parse_ignore_list(raw_value)
    else:
        value = raw_value

    if value is None:
        logger.debug(f"Rejected value {raw_value!r} for setting {key}")
        return False

    setattr(config, key, value)
    return True


def reset_settings(config: LinkerConfig) -> None:
    """Restore every setting to its default in place."""
    defaults = LinkerConfig()
    for key in LinkerConfig.model_fields:
        setattr(config, key, getattr(defaults, key))
