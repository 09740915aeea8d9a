#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading.

Settings can be kept in ``.layoutslots.toml``, ``.layoutslots.yaml``,
``.layoutslots.yml``, ``.layoutslots.json`` or a ``[tool.layoutslots]``
table in ``pyproject.toml``. The file is searched from the working
directory upward, then in the home directory. Recognized tables:

.. code-block:: toml

    [session]
    dedup_enabled = true
    reserved_region_classes = ["header-section", "footer-section"]

    [parser]
    html_parser = "html.parser"

    [renderer]
    self_close_empty = true

    [api]
    api_base_url = "https://dashboard.example.com"
    timeout = 15

"""

import json
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional, Tuple

import yaml

from layoutslots.constants import CONFIG_FILENAMES, ENV_CONFIG
from layoutslots.exceptions import ValidationError
from layoutslots.options import ClientOptions, MjmlParserOptions, MjmlRendererOptions, SessionOptions

logger = logging.getLogger(__name__)

_DEDICATED_FILENAMES = [name for name in CONFIG_FILENAMES if name != "pyproject.toml"]


def _config_error(message: str, config_path: Path, error: Exception | None = None) -> ValidationError:
    return ValidationError(message, parameter_name="config", parameter_value=str(config_path), original_error=error)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.layoutslots]`` table of a pyproject.toml file (empty dict if absent).

    Raises
    ------
    ValidationError
        If pyproject.toml cannot be parsed or the table is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise _config_error(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", pyproject_path, e) from e
    except OSError as e:
        raise _config_error(f"Error reading pyproject.toml {pyproject_path}: {e}", pyproject_path, e) from e

    config = data.get("tool", {}).get("layoutslots", {})
    if not isinstance(config, dict):
        raise _config_error(
            f"[tool.layoutslots] section in {pyproject_path} must be a table, got {type(config).__name__}",
            pyproject_path,
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the first configuration file found walking up from ``start_dir``.

    In each directory the dedicated files are checked first, then a
    pyproject.toml that has a ``[tool.layoutslots]`` table.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in _DEDICATED_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ValidationError:
                logger.debug(f"Skipping unreadable {pyproject_path}")

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the parent directories, then the home directory."""
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in _DEDICATED_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path
    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration file, detecting the format from its name.

    Parameters
    ----------
    config_path : Path or str
        ``.toml``, ``.yaml``/``.yml``, ``.json`` or ``pyproject.toml``

    Returns
    -------
    dict
        Configuration mapping

    Raises
    ------
    ValidationError
        If the file is missing, unreadable or not a mapping

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise _config_error(f"Configuration file does not exist: {config_path}", config_path)

    ext = config_path.suffix.lower()
    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(config_path)

    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise _config_error(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", config_path)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise _config_error(f"Invalid config file {config_path}: {e}", config_path, e) from e
    except OSError as e:
        raise _config_error(f"Error reading config file {config_path}: {e}", config_path, e) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise _config_error(f"Config file must contain a mapping, got {type(config).__name__}", config_path)
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two configuration mappings; ``override`` wins on conflicts.

    Examples
    --------
        >>> merge_configs({"api": {"timeout": 5}}, {"api": {"token": "t"}})
        {'api': {'timeout': 5, 'token': 't'}}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_with_priority(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from ``--config``, then ``LAYOUTSLOTS_CONFIG``, then discovery.

    Returns an empty dict when no file is found.
    """
    if explicit_path:
        return load_config_file(explicit_path)

    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        return load_config_file(env_path)

    discovered = discover_config_file()
    if discovered:
        logger.debug(f"Using configuration file {discovered}")
        return load_config_file(discovered)
    return {}


def _section_kwargs(config: Dict[str, Any], section: str, options_class: type) -> Dict[str, Any]:
    table = config.get(section) or {}
    if not isinstance(table, dict):
        raise ValidationError(
            f"[{section}] must be a table, got {type(table).__name__}",
            parameter_name=section,
            parameter_value=table,
        )
    known = {f.name for f in fields(options_class)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValidationError(
            f"Unknown option(s) in [{section}]: {', '.join(unknown)}",
            parameter_name=section,
            parameter_value=unknown,
        )
    return dict(table)


def options_from_config(config: Dict[str, Any]) -> Tuple[SessionOptions, ClientOptions]:
    """Build session and client options from a configuration mapping.

    Environment variables fill client settings the file leaves out.

    Raises
    ------
    ValidationError
        If a table holds unknown keys or invalid values

    """
    try:
        parser_options = MjmlParserOptions(**_section_kwargs(config, "parser", MjmlParserOptions))
        renderer_options = MjmlRendererOptions(**_section_kwargs(config, "renderer", MjmlRendererOptions))
        session_kwargs = _section_kwargs(config, "session", SessionOptions)
        session_kwargs.pop("parser_options", None)
        session_kwargs.pop("renderer_options", None)
        if "reserved_region_classes" in session_kwargs:
            session_kwargs["reserved_region_classes"] = tuple(session_kwargs["reserved_region_classes"])
        session_options = SessionOptions(
            parser_options=parser_options, renderer_options=renderer_options, **session_kwargs
        )
        client_options = ClientOptions.from_env(**_section_kwargs(config, "api", ClientOptions))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid configuration: {e}", original_error=e) from e
    return session_options, client_options
