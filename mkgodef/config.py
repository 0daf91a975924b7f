"""
Configuration system for mkgodef.

Supports:
- TOML configuration files (mkgodef.toml)
- CLI argument overrides
- Auto-discovery of the configuration file in parent directories
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Flag, auto
from pathlib import Path
from typing import Any, Iterable, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None


CONFIG_FILENAME = "mkgodef.toml"

DEFAULT_PACKAGE = "godefs"
DEFAULT_MODES = ["enum", "type", "func"]
MODE_NAMES = ("enum", "type", "func", "rawfunc")


class ConfigError(ValueError):
    """Invalid or incomplete configuration."""


class Mode(Flag):
    """Requested output categories."""
    NONE = 0
    ENUM = auto()
    TYPE = auto()
    FUNC = auto()
    RAWFUNC = auto()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Mode":
        """
        Build a mode from names such as ["enum", "func"].

        Comma separated entries ("enum,type") are split.

        Raises:
            ConfigError: on an unknown mode name
        """
        mode = cls.NONE
        for name in names:
            for part in name.split(","):
                part = part.strip().lower()
                if not part:
                    continue
                if part not in MODE_NAMES:
                    raise ConfigError(
                        f"Unknown mode {part!r} (expected one of: {', '.join(MODE_NAMES)})"
                    )
                mode |= cls[part.upper()]
        return mode


def _str_list(data: dict, key: str, default: Optional[list[str]] = None) -> list[str]:
    value = data.get(key, default if default is not None else [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


@dataclass
class MkgodefConfig:
    """Main configuration container."""

    project_root: Path = field(default_factory=Path.cwd)
    package: str = DEFAULT_PACKAGE
    modes: list[str] = field(default_factory=lambda: list(DEFAULT_MODES))
    headers: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    ignore_macros: list[str] = field(default_factory=list)

    # Explicit C name -> Go type overrides, emitted as "+godefs map" pragmas
    godefs_map: dict[str, str] = field(default_factory=dict)

    output: Optional[Path] = None
    gofmt: str = "gofmt"

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if isinstance(self.project_root, str):
            self.project_root = Path(self.project_root)
        if isinstance(self.output, str):
            self.output = Path(self.output)

    @property
    def mode(self) -> Mode:
        return Mode.from_names(self.modes)

    @classmethod
    def from_file(cls, path: Path) -> "MkgodefConfig":
        """Load configuration from a TOML file."""
        if tomllib is None:
            raise ImportError(
                "tomli is required for Python < 3.11. "
                "Install with: pip install tomli"
            )

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"open {path} config file: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"read config {path}: {e}") from e

        return cls._from_dict(data, path.parent)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], base_path: Path) -> "MkgodefConfig":
        """Create config from dictionary."""
        package = data.get("package", DEFAULT_PACKAGE)
        if not isinstance(package, str):
            raise ConfigError("'package' must be a string")

        godefs_map = data.get("godefs_map", {})
        if not isinstance(godefs_map, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in godefs_map.items()
        ):
            raise ConfigError("'godefs_map' must be a table of strings")

        output = data.get("output")
        if output is not None and not isinstance(output, str):
            raise ConfigError("'output' must be a string")

        gofmt = data.get("gofmt", "gofmt")
        if not isinstance(gofmt, str):
            raise ConfigError("'gofmt' must be a string")

        config = cls(
            project_root=base_path,
            package=package,
            modes=_str_list(data, "mode", DEFAULT_MODES),
            headers=_str_list(data, "headers"),
            args=_str_list(data, "args"),
            sources=_str_list(data, "sources"),
            ignore_macros=_str_list(data, "ignore_macros"),
            godefs_map=dict(godefs_map),
            output=Path(output) if output else None,
            gofmt=gofmt,
        )

        # Fail early on bad mode names
        Mode.from_names(config.modes)
        return config

    @classmethod
    def find_config(cls, start_path: Optional[Path] = None) -> Optional[Path]:
        """Find mkgodef.toml in current or parent directories."""
        if start_path is None:
            start_path = Path.cwd()

        current = start_path.resolve()

        for _ in range(10):  # Max 10 levels up
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return config_path

            parent = current.parent
            if parent == current:
                break
            current = parent

        return None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "MkgodefConfig":
        """Load configuration, auto-discovering if path not provided."""
        if config_path is not None:
            if not config_path.exists():
                raise ConfigError(f"config file not found: {config_path}")
            return cls.from_file(config_path)

        found = cls.find_config()
        if found is not None:
            return cls.from_file(found)

        # Return default config with current directory as root
        return cls(project_root=Path.cwd())

    def validate(self) -> None:
        """
        Check the configuration is complete enough to generate.

        Raises:
            ConfigError: no header, no package name or a bad mode
        """
        if not self.headers:
            raise ConfigError("please provide a header file to analyze")
        if not self.package:
            raise ConfigError("please provide a package name")
        Mode.from_names(self.modes)

    def resolve_path(self, path: Path) -> Path:
        """Resolve a relative path against project root."""
        if path.is_absolute():
            return path
        return self.project_root / path

    @property
    def output_abs(self) -> Optional[Path]:
        """Absolute path of the output file, None for stdout."""
        if self.output is None:
            return None
        return self.resolve_path(self.output)
