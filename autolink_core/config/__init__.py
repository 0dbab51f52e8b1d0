"""Configuration management for autolink."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from autolink_core.constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_NOTES_DIR, DEFAULT_LOG_LEVEL,
    DEFAULT_EXCLUDE_PATTERNS, MARKDOWN_EXTENSIONS,
    DEFAULT_LIVE_MODE, DEFAULT_DEBOUNCE_MS, DEFAULT_MIN_LENGTH,
    DEFAULT_SMART_ALIASING, DEFAULT_IGNORE_LIST
)

logger = logging.getLogger(__name__)

class LinkerConfig(BaseModel):
    """Link conversion settings."""
    live_mode: bool = Field(default=DEFAULT_LIVE_MODE, description="Convert patterns while typing")
    debounce_ms: int = Field(default=DEFAULT_DEBOUNCE_MS, description="Idle delay before live conversion")
    min_length: int = Field(default=DEFAULT_MIN_LENGTH, description="Ignore matches shorter than this")
    smart_aliasing: bool = Field(default=DEFAULT_SMART_ALIASING,
                                 description="Emit [[Clean Name|rawMatch]] when the clean name differs")
    ignore_list: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_LIST),
                                   description="Words that are never linked (case-sensitive)")
    enable_pascal: bool = Field(default=True, description="Link PascalCase words")
    enable_camel: bool = Field(default=True, description="Link camelCase words")
    enable_snake: bool = Field(default=True, description="Link snake_case words")
    custom_pattern: str = Field(default="", description="Extra regular expression to link")

    @field_validator('custom_pattern', mode='before')
    @classmethod
    def validate_custom_pattern(cls, v: Any) -> str:
        """Treat a null pattern as empty."""
        return v or ""

class ScanConfig(BaseModel):
    """Directory scanning configuration model."""
    exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
                                        description="Files and directories to skip")
    extensions: List[str] = Field(default_factory=lambda: list(MARKDOWN_EXTENSIONS),
                                  description="File extensions to convert")

    @field_validator('extensions')
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        """Make sure every extension starts with a dot."""
        return [ext if ext.startswith('.') else '.' + ext for ext in v]

class LoggingConfig(BaseModel):
    """Logging configuration model."""
    level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            logger.warning(f"Invalid logging level: {v}. Using default: {DEFAULT_LOG_LEVEL}")
            return DEFAULT_LOG_LEVEL
        return v.upper()

class AutolinkConfig(BaseModel):
    """Main configuration model."""
    notes_dir: str = Field(default=DEFAULT_NOTES_DIR, description="Path to notes directory")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    linker: LinkerConfig = Field(default_factory=LinkerConfig, description="Link conversion settings")
    scan: ScanConfig = Field(default_factory=ScanConfig, description="Directory scanning configuration")

    @field_validator('notes_dir')
    @classmethod
    def resolve_notes_dir(cls, v: str) -> str:
        """Resolve notes directory path."""
        return resolve_path(v)

def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from the YAML config file.

    Args:
        config_path: Path to the config file. If None, default is used.

    Returns:
        Dict with configuration values.
    """
    path = str(config_path or DEFAULT_CONFIG_PATH)
    config: Dict[str, Any] = {}

    try:
        resolved_path = resolve_path(path)
        config_file = Path(resolved_path)
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                raw_config = yaml.safe_load(f) or {}

            if not isinstance(raw_config, dict):
                logger.warning(f"Config file '{resolved_path}' does not contain a mapping. Using defaults.")
                raw_config = {}

            try:
                validated_config = AutolinkConfig(**raw_config)
                config = validated_config.model_dump()
                logger.debug(f"Loaded and validated configuration from {resolved_path}")
            except ValidationError as validation_error:
                logger.error(f"Configuration validation error: {validation_error}")
                logger.warning("Using default configuration with provided values where valid")
                config = raw_config
        else:
            logger.warning(f"Config file '{resolved_path}' not found. Using defaults.")
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config file '{path}': {e}")

    return config

def resolve_path(path: Optional[str]) -> Optional[str]:
    """Resolve path with environment variables and user home."""
    if path is None:
        return None
    return os.path.expanduser(os.path.expandvars(path))

def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get configuration value using a dot-separated path.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "section.key")
        default: Default value if path not found

    Returns:
        Configuration value or default if not found
    """
    keys = key_path.split('.')
    current = config

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current

def linker_config_from_dict(data: Optional[Dict[str, Any]]) -> LinkerConfig:
    """
    Build a LinkerConfig from a raw mapping, merged with defaults.

    Fields that fail validation are dropped (and logged) so one bad value
    does not discard the rest of the user's settings.
    """
    if not isinstance(data, dict):
        return LinkerConfig()
    known = {k: v for k, v in data.items() if k in LinkerConfig.model_fields}
    try:
        return LinkerConfig(**known)
    except ValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err.get("loc")}
        for field_name in sorted(invalid):
            logger.warning(f"Invalid value for linker.{field_name}: {known.get(field_name)!r}. Using default.")
        return LinkerConfig(**{k: v for k, v in known.items() if k not in invalid})


class ConfigStore:
    """Loads and saves the linker settings section of a YAML config file."""

    def __init__(self, config_path: Optional[str] = None):
        self.path = Path(resolve_path(str(config_path or DEFAULT_CONFIG_PATH)))

    def _read_raw(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error reading config file '{self.path}': {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Config file '{self.path}' is not a mapping. Ignoring it.")
            return {}
        return raw

    def load(self) -> LinkerConfig:
        """Load the linker settings merged with defaults."""
        return linker_config_from_dict(self._read_raw().get("linker"))

    def save(self, linker_config: LinkerConfig) -> bool:
        """Write the linker settings back, keeping all other sections."""
        raw = self._read_raw()
        raw["linker"] = linker_config.model_dump()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(raw, f, allow_unicode=True, sort_keys=False)
            logger.debug(f"Saved linker settings to {self.path}")
            return True
        except OSError as e:
            logger.error(f"Error writing config file '{self.path}': {e}")
            return False
