"""Load ProwlConfig from prowl.yaml / prowl.toml if present.

Merges file config with CLI kwargs. CLI overrides file, file overrides
the ``PROWL_ENV`` defaults.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

import yaml

from prowl._errors import ConfigError
from prowl.config import ProwlConfig

_CONFIG_KEYS = frozenset({
    "routes_dir",
    "host",
    "port",
    "workers",
    "hot_reload",
    "extensions",
    "exclude_prefix",
    "debounce_ms",
    "log_level",
})


def load_config(root: Path, **overrides: object) -> ProwlConfig:
    """Load ProwlConfig from root, optionally merging prowl.yaml.

    Looks for prowl.yaml, prowl.yml, or prowl.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If the config file is malformed or names unknown keys.

    """
    file_config = _read_prowl_config(root)
    merged = {**environment_defaults(), **file_config, **overrides}
    if "extensions" in merged and isinstance(merged["extensions"], (list, str)):
        value = merged["extensions"]
        merged["extensions"] = (value,) if isinstance(value, str) else tuple(value)
    try:
        return ProwlConfig(root=Path(root), **merged)
    except TypeError as exc:
        msg = f"Invalid prowl configuration: {exc}"
        raise ConfigError(msg) from exc


def environment_defaults() -> dict[str, object]:
    """Defaults derived from ``PROWL_ENV``.

    Production quiets logging to warnings and keeps the registry immutable.
    Anything else is treated as development.
    """
    if os.environ.get("PROWL_ENV", "").lower() == "production":
        return {"log_level": "warning", "hot_reload": False}
    return {"log_level": "info"}


def _read_prowl_config(root: Path) -> dict[str, object]:
    """Read prowl config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("prowl.yaml", "prowl.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "prowl.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_prowl_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data, path)


def _flatten_prowl_section(data: dict[str, object], path: Path) -> dict[str, object]:
    """Extract prowl.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "prowl" and k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("prowl")
    if isinstance(section, dict):
        unknown = set(section) - _CONFIG_KEYS
        if unknown:
            msg = f"{path}: unknown prowl settings {sorted(unknown)}"
            raise ConfigError(msg)
        result.update(section)
    return result
