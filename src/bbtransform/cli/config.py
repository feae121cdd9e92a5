#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration file discovery and loading for the bbtransform CLI.

A configuration file holds two optional tables, ``parser`` and ``html``,
whose keys are the fields of :class:`~bbtransform.options.BBCodeParserOptions`
and :class:`~bbtransform.options.HtmlRendererOptions`:

.. code-block:: toml

    [parser]
    standalone-tags = [":)", "hr"]
    max-nesting-depth = 50

    [html]
    convert-newlines = true
    keep-tags = ["spoiler"]

"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from bbtransform.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION
from bbtransform.exceptions import ConfigError
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("parser", "html")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.bbtransform]`` section from a pyproject.toml file.

    Returns
    -------
    dict
        Configuration dictionary, or empty dict if the section is absent

    Raises
    ------
    ConfigError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}", config_path=str(pyproject_path)) from e
    except OSError as e:
        raise ConfigError(f"Error reading {pyproject_path}: {e}", config_path=str(pyproject_path)) from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, "
            f"got {type(config).__name__}",
            config_path=str(pyproject_path),
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory from ``start_dir`` up to the filesystem root is checked for
    the dedicated config files in priority order, then for a pyproject.toml
    carrying a ``[tool.bbtransform]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()
    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError:
                logger.debug("Skipping unreadable %s during config discovery", pyproject_path)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Parent directories of ``start_dir`` (default: cwd) are searched first,
    then the user's home directory.
    """
    config_in_parents = find_config_in_parents(start_dir)
    if config_in_parents:
        return config_in_parents

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    The format is chosen from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ConfigError
        If the file cannot be read, parsed, or has invalid format

    Examples
    --------
    >>> config = load_config_file(".bbtransform.toml")
    >>> config.get("html", {}).get("convert-newlines")
    True

    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))
    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}", config_path=str(config_path))

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        return _load_pyproject_section(config_path)
    if ext == ".toml":
        return _load_toml_config(config_path)
    if ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    if ext == ".json":
        return _load_json_config(config_path)
    raise ConfigError(
        f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", config_path=str(config_path)
    )


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {config_path}: {e}", config_path=str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Error reading TOML config {config_path}: {e}", config_path=str(config_path)) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}", config_path=str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Error reading JSON config {config_path}: {e}", config_path=str(config_path)) from e

    if not isinstance(config, dict):
        raise ConfigError(
            f"JSON config file must contain an object, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}", config_path=str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Error reading YAML config {config_path}: {e}", config_path=str(config_path)) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries, recursing into nested tables.

    Examples
    --------
    >>> merge_configs({"html": {"escape-text": True}}, {"html": {"convert-newlines": True}})
    {'html': {'escape-text': True, 'convert-newlines': True}}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config``)
    2. Environment variable config path (``BBTRANSFORM_CONFIG``)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration dictionary (empty dict if no config found)

    """
    if explicit_path:
        return load_config_file(explicit_path)
    if env_var_path:
        return load_config_file(env_var_path)

    discovered = discover_config_file()
    if discovered:
        logger.debug("Using configuration file %s", discovered)
        return load_config_file(discovered)
    return {}


def options_from_config(config: Dict[str, Any]) -> tuple[BBCodeParserOptions, HtmlRendererOptions]:
    """Build parser and renderer options from a loaded configuration.

    List values are accepted for set-valued options.

    Raises
    ------
    ConfigError
        If the configuration has unknown sections or keys, or invalid values

    """
    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown configuration sections: {', '.join(unknown)}")

    tables = {}
    for section in CONFIG_SECTIONS:
        table = config.get(section, {})
        if not isinstance(table, dict):
            raise ConfigError(f"Configuration section '{section}' must be a table, got {type(table).__name__}")
        tables[section] = table

    try:
        parser_options = BBCodeParserOptions.from_mapping(tables["parser"])
        html_options = HtmlRendererOptions.from_mapping(tables["html"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}", original_error=e) from e

    return parser_options, html_options
