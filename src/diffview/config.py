#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/config.py
"""Configuration file discovery and loading.

Configuration is a mapping with up to two tables:

.. code-block:: toml

    [highlight]
    theme = "dracula"
    add_background = "#0b3d0b"

    [diff]
    tab_width = 4

The same layout is accepted in ``.diffview.toml``, ``.diffview.yaml`` /
``.diffview.yml`` and under ``[tool.diffview]`` in ``pyproject.toml``. Keys
are validated against the option dataclasses; unknown tables or keys are
rejected instead of ignored.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from diffview.constants import (
    CONFIG_FILENAMES,
    PYPROJECT_FILENAME,
    PYPROJECT_SECTION,
    USER_CONFIG_DIRNAME,
    USER_CONFIG_FILENAME,
)
from diffview.exceptions import ConfigError, ValidationError
from diffview.options.base import BaseDiffOptions
from diffview.options.highlight import HighlightOptions
from diffview.options.source import DiffSourceOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DIFFVIEW_CONFIG"

# Config table name -> options class it populates
CONFIG_SECTIONS: dict[str, type[BaseDiffOptions]] = {
    "highlight": HighlightOptions,
    "diff": DiffSourceOptions,
}


@dataclass(frozen=True)
class DiffViewConfig:
    """Fully validated configuration.

    Parameters
    ----------
    highlight : HighlightOptions
        Syntax highlighting settings
    diff : DiffSourceOptions
        Diff source settings
    source_path : Path or None
        File the configuration was read from, None for defaults

    """

    highlight: HighlightOptions = field(default_factory=HighlightOptions)
    diff: DiffSourceOptions = field(default_factory=DiffSourceOptions)
    source_path: Optional[Path] = None


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.diffview]`` table of a pyproject.toml.

    Returns an empty dict when the table is missing.

    Raises
    ------
    ConfigError
        If the file is not valid TOML or the section is not a table

    """
    data = _load_toml_config(pyproject_path)
    tool = data.get("tool", {})
    if not isinstance(tool, dict) or PYPROJECT_SECTION not in tool:
        return {}

    config = tool[PYPROJECT_SECTION]
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_SECTION}] section in {pyproject_path} must be a table, got {type(config).__name__}",
            config_path=str(pyproject_path),
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Walks from ``start_dir`` to the filesystem root. In each directory the
    dedicated files (``.diffview.toml``, ``.diffview.yaml``,
    ``.diffview.yml``) are checked first, then ``pyproject.toml`` if it has
    a ``[tool.diffview]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                # A broken pyproject.toml belongs to some other project
                logger.debug("Skipping unreadable %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def user_config_path() -> Path:
    """Return the per-user config file path (``$XDG_CONFIG_HOME/diffview/config.toml``)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / USER_CONFIG_DIRNAME / USER_CONFIG_FILENAME


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Search order:

    1. ``start_dir`` (default: cwd) and its parents, see
       :func:`find_config_in_parents`
    2. :func:`user_config_path`

    Returns
    -------
    Path or None
        Path to the discovered file

    """
    config_in_parents = find_config_in_parents(start_dir)
    if config_in_parents:
        return config_in_parents

    user_path = user_config_path()
    if user_path.is_file():
        return user_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a raw configuration mapping from TOML, YAML or pyproject.toml.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration mapping (the ``[tool.diffview]`` table for
        pyproject.toml)

    Raises
    ------
    ConfigError
        If the file does not exist, has an unsupported format, or cannot be
        parsed

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}", config_path=str(config_path))

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == PYPROJECT_FILENAME:
        return _load_pyproject_section(config_path)
    elif ext == ".toml":
        return _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)

    raise ConfigError(f"Unsupported config file format: {ext}. Use .toml or .yaml", config_path=str(config_path))


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(
            f"Invalid TOML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    # An empty YAML document is an empty configuration
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def _build_options(
    options_class: type[BaseDiffOptions],
    section: str,
    values: Any,
    config_path: Optional[Path],
) -> BaseDiffOptions:
    """Validate one config table and build its options object."""
    path_str = str(config_path) if config_path is not None else None
    if not isinstance(values, dict):
        raise ConfigError(
            f"[{section}] must be a table, got {type(values).__name__}", config_path=path_str, parameter_name=section
        )

    unknown = sorted(set(values) - set(options_class.field_names()))
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in [{section}]: {', '.join(unknown)}. "
            f"Accepted keys: {', '.join(options_class.field_names())}",
            config_path=path_str,
            parameter_name=unknown[0],
        )

    try:
        return options_class(**values)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid value in [{section}]: {e.message}",
            config_path=path_str,
            parameter_name=e.parameter_name,
            original_error=e,
        ) from e
    except TypeError as e:
        # Dataclass constructors reject wrongly shaped values with TypeError
        raise ConfigError(f"Invalid [{section}] table: {e}", config_path=path_str, original_error=e) from e


def parse_config(data: Dict[str, Any], config_path: Optional[Path] = None) -> DiffViewConfig:
    """Validate a raw configuration mapping.

    Parameters
    ----------
    data : dict
        Mapping as returned by :func:`load_config_file`
    config_path : Path, optional
        Origin of the mapping, for error messages

    Returns
    -------
    DiffViewConfig
        Validated configuration

    Raises
    ------
    ConfigError
        If a table or key is unknown or a value is invalid

    """
    unknown = sorted(set(data) - set(CONFIG_SECTIONS))
    if unknown:
        raise ConfigError(
            f"Unknown config section(s): {', '.join(unknown)}. Accepted: {', '.join(CONFIG_SECTIONS)}",
            config_path=str(config_path) if config_path is not None else None,
            parameter_name=unknown[0],
        )

    built = {
        section: _build_options(options_class, section, data[section], config_path)
        for section, options_class in CONFIG_SECTIONS.items()
        if section in data
    }
    return DiffViewConfig(source_path=config_path, **built)


def load_config(
    explicit_path: Optional[Path | str] = None,
    start_dir: Optional[Path] = None,
) -> DiffViewConfig:
    """Load configuration with priority handling.

    Priority order:

    1. ``explicit_path`` (the ``--config`` flag)
    2. the ``DIFFVIEW_CONFIG`` environment variable
    3. :func:`discover_config_file`

    Returns defaults when no file is found.

    Raises
    ------
    ConfigError
        If a selected file cannot be loaded or is invalid

    """
    if explicit_path:
        config_path: Optional[Path] = Path(explicit_path)
    elif os.environ.get(CONFIG_ENV_VAR):
        config_path = Path(os.environ[CONFIG_ENV_VAR])
    else:
        config_path = discover_config_file(start_dir)

    if config_path is None:
        logger.debug("No configuration file found; using defaults")
        return DiffViewConfig()

    logger.debug("Loading configuration from %s", config_path)
    return parse_config(load_config_file(config_path), config_path)


def load_highlight_options(path: Optional[Path | str] = None) -> HighlightOptions:
    """Load :class:`HighlightOptions` from a config file, or defaults when none exists."""
    return load_config(path).highlight
