"""
Configuration — Extraction settings

Config hierarchy (highest to lowest priority):
  1. Environment variables (INTL_EXTRACT_*)
  2. Project config (intl_extract.yaml)
  3. User config (~/.intl_extract/config.yaml)
  4. Defaults
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


ENV_PREFIX = "INTL_EXTRACT_"
TRUE_VALUES = ('true', '1', 'yes', 'on')
FALSE_VALUES = ('false', '0', 'no', 'off')


@dataclass
class ExtractionConfig:
    """Switches that shape one extraction run."""
    suppress_warnings: bool = False      # Don't print warnings (still recorded)
    warnings_are_errors: bool = False    # Any warning fails the run
    allow_embedded_plurals_and_genders: bool = True  # 'You have ${Intl.plural(...)}' allowed
    examples_required: bool = False      # Messages with parameters need examples:
    description_required: bool = False   # Every message needs desc:
    include_source_text: bool = False    # Keep the call's source on each message

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, bool):
                return f"Setting '{item.name}' must be true or false, got {value!r}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExtractionConfig':
        """Create from dictionary, ignoring unknown keys."""
        known = {item.name for item in fields(cls)}
        values = {}
        for key, value in (data or {}).items():
            if key in known:
                values[key] = _coerce_bool(value)
        return cls(**values)


def _coerce_bool(value: Any) -> Any:
    """Accept YAML/env spellings of booleans; leave anything else for validate()."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    return value


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (INTL_EXTRACT_SUPPRESS_WARNINGS=1, ...)
      2. Project config (intl_extract.yaml)
      3. User config (~/.intl_extract/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".intl_extract"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_FILE = "intl_extract.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_config_path: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._user_config_path = Path(user_config_path) if user_config_path else self.USER_CONFIG_FILE
        self._config: Optional[ExtractionConfig] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    def load(self) -> ExtractionConfig:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data.update(self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data.update(self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        for item in fields(ExtractionConfig):
            env_value = os.environ.get(ENV_PREFIX + item.name.upper())
            if env_value:
                config_data[item.name] = env_value

        self._config = ExtractionConfig.from_dict(config_data)
        return self._config

    def save_project(self, config: ExtractionConfig) -> None:
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: str) -> Optional[str]:
        """
        Set a configuration value in the project config.

        Returns:
            Error message or None if successful
        """
        config = self.load()
        known = {item.name for item in fields(ExtractionConfig)}
        if key not in known:
            return f"Unknown setting: {key}. Valid: {', '.join(sorted(known))}"

        updated = ExtractionConfig.from_dict({**config.to_dict(), key: value})
        error = updated.validate()
        if error:
            return error

        self.save_project(updated)
        return None

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore unreadable or malformed config
        return data if isinstance(data, dict) else {}
