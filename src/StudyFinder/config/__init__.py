"""Public configuration API for StudyFinder."""

from __future__ import annotations

from StudyFinder.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from StudyFinder.config.runtime import RuntimeConfig
from StudyFinder.config.search import SearchConfig
from StudyFinder.config.server import ServerConfig

__all__ = [
    "RuntimeConfig",
    "ServerConfig",
    "SearchConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
