# global_config_parser.py
"""
YAML configuration for xyDoc.

Settings live in global_config.yaml under three sections: ``paths``
(input model, output root), ``pdf`` (fonts dir, margins, spacing, author)
and ``logging`` (level, debug). String values may reference the
environment as ``${VAR}`` or ``${VAR:-fallback}``, and the variables in
FLAT_KEY_MAP override the file outright.

Usage:
    from utils.parsers.global_config_parser import GlobalConfig

    config = GlobalConfig(config_file="global_config.yaml", override_file="local.yaml")
    out_dir = config.get_path("paths.out_dir")
    margin  = config.get_float("pdf.margin_left", 54)
    author  = config.get("XYDOC_AUTHOR")  # same as "pdf.author"
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

logger = logging.getLogger(__name__)


# Environment variables and the dot-paths they override
FLAT_KEY_MAP: Dict[str, str] = {
    "XYDOC_INPUT":      "paths.input_path",
    "XYDOC_OUT_DIR":    "paths.out_dir",
    "XYDOC_FONTS_DIR":  "pdf.fonts_dir",
    "XYDOC_AUTHOR":     "pdf.author",
    "LOG_LEVEL":        "logging.level",
    "DEBUG":            "logging.debug",
}

# Dot-paths holding filesystem paths; stored absolute
PATH_KEYS: Set[str] = {
    "paths.input_path",
    "paths.out_dir",
    "pdf.fonts_dir",
}

_ENV_REF = re.compile(r"\$\{([^}:]+)(?::-(.*?))?\}")

_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Base error for configuration handling."""


class ConfigFileError(ConfigError):
    """A configuration file is missing, unreadable or not a YAML mapping."""


class ConfigValidationError(ConfigError):
    """A required setting is absent."""


# ── YAML helpers ──────────────────────────────────────────────────────

def _read_mapping(filepath: str) -> Dict[str, Any]:
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigFileError(f"Cannot read config '{filepath}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Config '{filepath}' must be a mapping, got {type(data).__name__}")
    return data


def _expand_env(value: Any) -> Any:
    """Substitute ``${VAR}`` references; unknown ones without a fallback stay as written."""
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    if not isinstance(value, str):
        return value

    def substitute(match):
        name, fallback = match.group(1), match.group(2)
        if name in os.environ:
            return os.environ[name]
        return match.group(0) if fallback is None else fallback

    return _ENV_REF.sub(substitute, value)


def _merge(base: Dict[str, Any], layer: Dict[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge; *layer* wins on conflicts."""
    result = dict(base)
    for key, value in layer.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _lookup(data: Dict[str, Any], dot_path: str) -> Any:
    node: Any = data
    for part in dot_path.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _assign(data: Dict[str, Any], dot_path: str, value: Any) -> None:
    *parents, leaf = dot_path.split(".")
    node = data
    for part in parents:
        if not isinstance(node.get(part), dict):
            node[part] = {}
        node = node[part]
    node[leaf] = value


def _absolute(value: Any) -> str:
    return str(Path(value).expanduser().resolve())


# ── GlobalConfig ──────────────────────────────────────────────────────

class GlobalConfig:
    """
    Layered configuration with dot-path access.

    Precedence, lowest first: the base file, the override file, environment
    variables from FLAT_KEY_MAP, then values passed to ``set()`` (CLI flags).
    """

    SEARCH_PATHS = [
        "global_config.yaml",
        "config/global_config.yaml",
        "global_config.yml",
    ]

    def __init__(
        self,
        config_file: Optional[str] = None,
        override_file: Optional[str] = None,
        required: Optional[List[str]] = None,
        auto_load: bool = True,
        env_override: bool = True,
    ):
        """
        Args:
            config_file: YAML file to load; searched for when None.
            override_file: Second YAML file merged over the first.
            required: Dot-paths that must end up non-empty.
            auto_load: Load immediately.
            env_override: Apply the FLAT_KEY_MAP environment variables.
        """
        self._data: Dict[str, Any] = {}
        self._sources: List[str] = []
        self._required = list(required or [])
        self._env_override = env_override

        if auto_load:
            self.load(config_file, override_file)

    def load(self, config_file: Optional[str] = None, override_file: Optional[str] = None) -> None:
        """
        Build the configuration from files and environment.

        Raises:
            ConfigFileError: A named file is missing or unreadable.
            ConfigValidationError: A required key is still empty.
        """
        for named in (config_file, override_file):
            if named and not os.path.isfile(named):
                raise ConfigFileError(f"Config file not found: {named}")

        self._data = {}
        self._sources = []
        for source in (config_file or self._find_config_file(), override_file):
            if source:
                self._data = _merge(self._data, _read_mapping(source))
                self._sources.append(source)
        if self._sources:
            logger.debug(f"Configuration loaded from {', '.join(self._sources)}")
        else:
            logger.info("No global_config.yaml found; using defaults and environment")

        self._data = _expand_env(self._data)
        if self._env_override:
            for env_key, dot_path in FLAT_KEY_MAP.items():
                if env_key in os.environ:
                    _assign(self._data, dot_path, os.environ[env_key])

        for dot_path in PATH_KEYS:
            value = _lookup(self._data, dot_path)
            if isinstance(value, str) and value:
                _assign(self._data, dot_path, _absolute(value))

        missing = [key for key in self._required if not self.has(key)]
        if missing:
            logger.error(f"Missing required configuration keys: {missing}")
            raise ConfigValidationError(f"Missing required configuration keys: {missing}")

    def _find_config_file(self) -> Optional[str]:
        project_root = Path(__file__).resolve().parents[2]
        for base in (Path.cwd(), project_root):
            for candidate in self.SEARCH_PATHS:
                if (base / candidate).is_file():
                    return str(base / candidate)
        return None

    # ── Accessors ─────────────────────────────────────────────────────

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dot-path, or at the dot-path an env-style key maps to."""
        value = _lookup(self._data, FLAT_KEY_MAP.get(key, key))
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        dot_path = FLAT_KEY_MAP.get(key, key)
        if dot_path in PATH_KEYS and isinstance(value, (str, Path)) and str(value):
            value = _absolute(value)
        _assign(self._data, dot_path, value)

    def has(self, key: str) -> bool:
        return self.get(key) not in (None, "")

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric config value {key}={value!r}")
            return default

    def get_path(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.get(key) or default
        return _absolute(value) if isinstance(value, str) and value else None

    def __repr__(self) -> str:
        return f"GlobalConfig(sources={self._sources})"
