"""Configuration for nodeopts.

NodeConfig holds process-level settings (where the durable store lives,
which boot files to read). BootConfig is the hierarchical boot-time
configuration: TOML files merged in order, then dotted-path overrides on
top. It is read once at startup; option defaults are folded from it by the
option registry.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import toml

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("true", "yes", "on")
_FALSE_STRINGS = ("false", "no", "off")


class BootConfigError(Exception):
    """Base class for boot configuration failures."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigMissingError(BootConfigError):
    """The requested path is not present in the boot configuration."""


class ConfigWrongTypeError(BootConfigError):
    """The value at a path cannot be read as the requested type."""


class ConfigParseError(BootConfigError):
    """A boot configuration file is not valid TOML."""


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries recursively; override wins."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_config(result[key], value)
        else:
            result[key] = value

    return result


def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = d
    for p in parts[:-1]:
        cur = cur.setdefault(p, {})
    cur[parts[-1]] = value


class BootConfig:
    """Read-only hierarchical configuration with dotted-path lookup."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data = data or {}

    @classmethod
    def load(cls, *paths: str | Path, overrides: dict[str, Any] | None = None) -> "BootConfig":
        """Load and merge TOML files in order, then apply dotted-path overrides.

        Later files win over earlier ones. Files that do not exist are
        skipped; files that exist but do not parse raise ConfigParseError.
        """
        data: dict[str, Any] = {}
        for path in paths:
            path = Path(path)
            if not path.exists():
                logger.debug("Boot config file not found, skipping: %s", path)
                continue
            try:
                with open(path, encoding="utf-8") as f:
                    layer = toml.load(f)
            except toml.TomlDecodeError as e:
                raise ConfigParseError(f"Invalid boot config file {path}: {e}") from e
            logger.info("Loaded boot config: %s", path)
            data = _merge_config(data, layer)

        if overrides:
            override_layer: dict[str, Any] = {}
            for dotted, value in overrides.items():
                _set_nested(override_layer, dotted, value)
            data = _merge_config(data, override_layer)

        return cls(data)

    def lookup(self, path: str) -> Any:
        """Return the raw value at a dotted path.

        Raises:
            ConfigMissingError: No value at path.
            ConfigWrongTypeError: An intermediate node is not a table.
        """
        cur: Any = self._data
        walked = []
        for part in path.split("."):
            if not isinstance(cur, dict):
                raise ConfigWrongTypeError(
                    f"Boot config path '{'.'.join(walked)}' is not a table", path
                )
            if part not in cur:
                raise ConfigMissingError(f"No configuration setting found for key '{path}'", path)
            cur = cur[part]
            walked.append(part)
        return cur

    def has_path(self, path: str) -> bool:
        try:
            self.lookup(path)
        except ConfigMissingError:
            return False
        return True

    def _wrong_type(self, path: str, expected: str, value: Any) -> ConfigWrongTypeError:
        return ConfigWrongTypeError(
            f"Boot config '{path}' has type {type(value).__name__} rather than {expected}", path
        )

    def get_boolean(self, path: str) -> bool:
        value = self.lookup(path)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise self._wrong_type(path, "boolean", value)

    def get_int(self, path: str) -> int:
        value = self.lookup(path)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise self._wrong_type(path, "integer", value)

    def get_float(self, path: str) -> float:
        value = self.lookup(path)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise self._wrong_type(path, "number", value)

    def get_string(self, path: str) -> str:
        value = self.lookup(path)
        if isinstance(value, str):
            return value
        raise self._wrong_type(path, "string", value)


@dataclass
class NodeConfig:
    """Process-level settings: store location and boot config files."""

    db_path: Path = field(default_factory=lambda: Path.home() / ".nodeopts" / "options.db")
    boot_config_paths: list[Path] = field(default_factory=list)

    @classmethod
    def from_env(cls):
        config = cls()
        db_path = os.environ.get("NODEOPTS_DB")
        if db_path:
            config.db_path = Path(db_path)
        boot_paths = os.environ.get("NODEOPTS_BOOT_CONFIG", "")
        config.boot_config_paths = [Path(p) for p in boot_paths.split(os.pathsep) if p]
        return config

    def load_boot_config(self) -> BootConfig:
        return BootConfig.load(*self.boot_config_paths)
