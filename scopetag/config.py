"""Configuration management for scopetag."""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import yaml

from .errors import InvalidConfigError


GLOBAL_CONFIG_PATH = Path.home() / ".scopetag.yaml"
DEFAULT_BRANCH = "main"

KNOWN_KEYS = ("branch", "pre_release_name", "pre_release_timestamp", "build_metadata")

PRE_RELEASE_NAME_RE = re.compile(r"^[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*$")


@dataclass(frozen=True)
class ScopeConfig:
    """Inputs of one resolution run.

    Attributes:
        branch: Branch whose latest commit is classified
        pre_release_name: Optional pre-release label, e.g. ``rc``
        pre_release_timestamp_layout: ``epoch``, ``datetime`` or a strftime format
        build_metadata: Optional build metadata appended after ``+``
    """

    branch: str = DEFAULT_BRANCH
    pre_release_name: Optional[str] = None
    pre_release_timestamp_layout: Optional[str] = None
    build_metadata: Optional[str] = None

    def validate(self) -> ScopeConfig:
        """Check values that can be checked before touching the repository."""
        if not self.branch:
            raise InvalidConfigError("branch must not be empty")
        if self.pre_release_name and not PRE_RELEASE_NAME_RE.match(self.pre_release_name):
            raise InvalidConfigError(
                f"pre-release name '{self.pre_release_name}' must be dot-separated "
                "identifiers of [0-9A-Za-z-]"
            )
        return self


class Config:
    """Manages scopetag configuration with hierarchical lookup.

    Config hierarchy (higher priority first):
    1. Local repo config (.scopetag.yaml at the repository root)
    2. Global config (~/.scopetag.yaml)

    When reading, local values override global.
    When writing, writes to the config path specified at init (local or global).
    """

    def __init__(self, config_path: Optional[Path] = None, enable_hierarchy: bool = True):
        """Initialize config.

        Args:
            config_path: Specific config file to use. If None, uses global config.
            enable_hierarchy: If True, uses hierarchical lookup (local + global).
                             If False, only uses the specified config_path.
        """
        self.config_path = config_path or GLOBAL_CONFIG_PATH
        self.enable_hierarchy = enable_hierarchy
        self._data: dict[str, Any] = {}
        self._global_data: dict[str, Any] = {}
        self.load()

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigError(f"Failed to load config from {path}: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Config file {path} must contain a mapping")
        return data

    def load(self) -> None:
        """Load configuration from file(s)."""
        self._data = self._read(self.config_path) if self.config_path.exists() else {}

        # Global config only backs a local one
        if self.enable_hierarchy and self.config_path != GLOBAL_CONFIG_PATH and GLOBAL_CONFIG_PATH.exists():
            self._global_data = self._read(GLOBAL_CONFIG_PATH)
        else:
            self._global_data = {}

    def save(self) -> None:
        """Save configuration to primary config file."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False)
        except OSError as e:
            raise InvalidConfigError(f"Failed to save config to {self.config_path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value with hierarchical lookup.

        Checks local config first, then global, then returns default.
        """
        if key in self._data:
            return self._data[key]
        if key in self._global_data:
            return self._global_data[key]
        return default

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value in the primary config."""
        self._data[key] = value

    def _get_str(self, key: str) -> Optional[str]:
        value = self.get(key)
        return None if value is None else str(value)

    @property
    def branch(self) -> str:
        """Branch to read the latest commit from."""
        return self._get_str("branch") or DEFAULT_BRANCH

    @branch.setter
    def branch(self, value: str) -> None:
        self.set("branch", value)

    @property
    def pre_release_name(self) -> Optional[str]:
        return self._get_str("pre_release_name")

    @pre_release_name.setter
    def pre_release_name(self, value: str) -> None:
        self.set("pre_release_name", value)

    @property
    def pre_release_timestamp(self) -> Optional[str]:
        return self._get_str("pre_release_timestamp")

    @pre_release_timestamp.setter
    def pre_release_timestamp(self, value: str) -> None:
        self.set("pre_release_timestamp", value)

    @property
    def build_metadata(self) -> Optional[str]:
        return self._get_str("build_metadata")

    @build_metadata.setter
    def build_metadata(self, value: str) -> None:
        self.set("build_metadata", value)

    def to_scope_config(self, **overrides: Optional[str]) -> ScopeConfig:
        """Build a validated ScopeConfig; non-None overrides win over file values."""
        values = {
            "branch": self.branch,
            "pre_release_name": self.pre_release_name,
            "pre_release_timestamp_layout": self.pre_release_timestamp,
            "build_metadata": self.build_metadata,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ScopeConfig(**values).validate()

    @classmethod
    def load_with_repo_context(cls, start_path: Optional[Path] = None) -> Config:
        """Load config with repo context if available.

        Inside a git repository the local ``.scopetag.yaml`` is used with the
        global file as fallback; outside one only the global file is read.
        """
        from .paths import get_repo_config_path

        repo_config_path = get_repo_config_path(start_path)
        if repo_config_path:
            return cls(config_path=repo_config_path, enable_hierarchy=True)
        return cls(config_path=GLOBAL_CONFIG_PATH, enable_hierarchy=False)
