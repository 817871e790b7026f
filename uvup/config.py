"""Configuration file loader for uvup.

Supports two formats:

- ``uvup.toml``: settings under a ``[uvup]`` table
- ``pyproject.toml``: settings under ``[tool.uvup]``

Discovery order:

1. Explicit path from ``--config`` or ``UVUP_CONFIG``
2. ``uvup.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.uvup]`` section in the current directory

Configuration precedence: defaults < config file < CLI args.

Example (``pyproject.toml``)::

    [tool.uvup]
    timeout = 10
    backup = true
    exclude = [".venv", "examples"]
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from uvup.exceptions import ConfigError
from uvup.utils.logger import get_logger
from uvup.constants import (
    DEFAULT_BACKUP,
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)

logger = get_logger("config")


@dataclass
class UvUpConfig:
    """Parsed and validated uvup configuration.

    Attributes:
        timeout: Registry request timeout in seconds.
        max_retries: Retries per registry request.
        backup: Write a timestamped backup before rewriting a manifest.
        exclude: Directory names skipped during discovery.
        source_path: Path to the loaded file, or ``None`` for defaults.
    """

    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    backup: bool = DEFAULT_BACKUP
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the options as a dictionary for debug logging."""
        return {
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "backup": self.backup,
            "exclude": list(self.exclude),
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    uvup_toml = cwd / "uvup.toml"
    if uvup_toml.is_file():
        logger.debug("Found uvup.toml: %s", uvup_toml)
        return uvup_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_uvup_section(pyproject_toml):
        logger.debug("Found [tool.uvup] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_uvup_section(path: Path) -> bool:
    """Check whether ``pyproject.toml`` carries a ``[tool.uvup]`` table.

    A broken ``pyproject.toml`` is not a configuration error here; the
    scan reports it as a skipped manifest instead.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "uvup" in tool


def load_config(config_path: Optional[Path] = None) -> UvUpConfig:
    """Load and validate uvup configuration.

    Returns defaults when no configuration file is found.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return UvUpConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        tool = _table(raw.get("tool", {}), "tool", resolved)
        section = _table(tool.get("uvup", {}), "tool.uvup", resolved)
    else:
        section = _table(raw.get("uvup", {}), "uvup", resolved)

    if not section:
        logger.debug("Config file found but no uvup section, using defaults")
        return UvUpConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _table(value: Any, name: str, path: Path) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(
            f"[{name}] must be a table, got {type(value).__name__}",
            config_path=str(path),
            option=name,
        )
    return value


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# option -> (validator, expected description)
_OPTIONS: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    "timeout": (_is_positive_int, "a positive integer"),
    "max_retries": (_is_non_negative_int, "a non-negative integer"),
    "backup": (_is_bool, "a boolean"),
    "exclude": (_is_string_list, "a list of strings"),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> UvUpConfig:
    """Validate a ``[uvup]`` / ``[tool.uvup]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    unknown = set(section) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = UvUpConfig()

    for option, value in section.items():
        validator, expected = _OPTIONS[option]
        if not validator(value):
            raise ConfigError(
                f"{option} must be {expected}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, list(value) if isinstance(value, list) else value)

    return config
