"""Root `AppConfig` assembled from the `log`, `server` and `search` sections.

A run reads ``config/default.yml`` and, when given a different file, deep-merges
that file over it before validation, so overrides only list what they change.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from StudyFinder.config.runtime import RuntimeConfig, check_runtime, load_runtime
from StudyFinder.config.search import SearchConfig, check_search, load_search
from StudyFinder.config.server import ServerConfig, check_server, load_server

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    runtime: RuntimeConfig
    server: ServerConfig
    search: SearchConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Load every section, then validate them in order.

    Raises:
        TypeError: On a wrongly typed value.
        ValueError: On a missing required key or an out-of-range value.
    """
    config = AppConfig(runtime=load_runtime(raw), server=load_server(raw), search=load_search(raw))
    check_runtime(config.runtime)
    check_server(config.server)
    check_search(config.search)
    return config


def load_config(path: Path) -> AppConfig:
    """Load a single YAML file with no default layer underneath."""
    return parse_config_dict(_read_yaml(path))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load `default_path` and deep-merge `config_path` over it."""
    base = _read_yaml(default_path)
    if Path(config_path) == Path(default_path):
        return parse_config_dict(base)
    return parse_config_dict(merge_config_dicts(base, _read_yaml(config_path)))


def parse_yaml(text: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return `base` with `override` merged in; nested mappings merge, other values replace."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(current, value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        return parse_yaml(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
