from __future__ import annotations
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .credentials import default_credentials_path
from .errors import ConfigError
from .utils import read_yaml

DEFAULT_CONFIG = "config/config.yaml"
MAX_OLDER_THAN_DAYS = 36500

_INT_FIELDS = ("older_than_days", "page_size", "connect_timeout", "read_timeout", "total_max_attempts")
_BOOL_FIELDS = ("skip_profile_check", "progress")
_STR_FIELDS = ("source_bucket", "dest_bucket", "new_prefix", "profile", "region")

# YAML section/key -> MigrationConfig field
_AWS_KEYS = {
    "profile": "profile",
    "region": "region",
    "credentials_file": "credentials_file",
    "skip_profile_check": "skip_profile_check",
    "connect_timeout": "connect_timeout",
    "read_timeout": "read_timeout",
    "total_max_attempts": "total_max_attempts",
}
_ARCHIVE_KEYS = {
    "source": "source_bucket",
    "dest": "dest_bucket",
    "new_prefix": "new_prefix",
    "older_than": "older_than_days",
    "page_size": "page_size",
    "max_pages": "max_pages",
    "progress": "progress",
}


@dataclass
class MigrationConfig:
    source_bucket: Optional[str] = None
    dest_bucket: Optional[str] = None
    new_prefix: str = ""
    older_than_days: int = 30
    profile: str = "default"
    skip_profile_check: bool = False
    credentials_file: Path = field(default_factory=default_credentials_path)
    region: Optional[str] = None
    page_size: int = 100
    max_pages: Optional[int] = None
    progress: bool = False
    connect_timeout: int = 10
    read_timeout: int = 60
    total_max_attempts: int = 1

    def _check_types(self) -> None:
        # bool is an int subclass
        for name in _INT_FIELDS + (("max_pages",) if self.max_pages is not None else ()):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be true or false, got {value!r}")
        for name in _STR_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {value!r}")

    def validate(self) -> None:
        self._check_types()
        if not self.source_bucket:
            raise ConfigError("You must specify a source bucket")
        if not self.dest_bucket:
            raise ConfigError("You must specify a destination bucket")
        if not 0 <= self.older_than_days <= MAX_OLDER_THAN_DAYS:
            raise ConfigError(
                f"older_than must be within 0..{MAX_OLDER_THAN_DAYS} days, got {self.older_than_days}"
            )
        if not 1 <= self.page_size <= 1000:
            raise ConfigError(f"page_size must be within 1..1000, got {self.page_size}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ConfigError(f"max_pages must be >= 1, got {self.max_pages}")


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Load YAML config if present, otherwise return {}.
    An explicitly given path that does not exist is an error.
    """
    path = config_path or DEFAULT_CONFIG
    try:
        cfg = read_yaml(path)
    except FileNotFoundError as e:
        if config_path:
            raise ConfigError(f"Config file not found: {config_path}") from e
        return {}
    except Exception as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return cfg


def build_config(cfg: Optional[Dict[str, Any]] = None, **overrides: Any) -> MigrationConfig:
    """
    Merge values with priority: overrides (CLI flags) -> YAML -> dataclass defaults.
    Overrides that are None are treated as "not given".
    """
    cfg = cfg or {}
    values: Dict[str, Any] = {}
    for section, mapping in (("aws", _AWS_KEYS), ("archive", _ARCHIVE_KEYS)):
        sub = cfg.get(section) or {}
        for yaml_key, attr in mapping.items():
            if sub.get(yaml_key) is not None:
                values[attr] = sub[yaml_key]

    known = {f.name for f in fields(MigrationConfig)}
    for name, value in overrides.items():
        if name not in known:
            raise TypeError(f"Unknown config option: {name}")
        if value is not None:
            values[name] = value

    if "credentials_file" in values:
        if not isinstance(values["credentials_file"], (str, Path)):
            raise ConfigError(f"credentials_file must be a path, got {values['credentials_file']!r}")
        values["credentials_file"] = Path(values["credentials_file"]).expanduser()
    return MigrationConfig(**values)
