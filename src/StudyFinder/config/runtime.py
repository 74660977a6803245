"""`log` section: console level and the optional per-run log file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from StudyFinder.config.common import check_choice, expect_bool, expect_str, get_section

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    level: str
    to_file: bool
    dir: str


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Read the `log` section; a missing section means INFO to console only."""
    section = get_section(raw, "log", required=False)
    return RuntimeConfig(
        level=expect_str(section.get("level", "INFO"), "log.level").strip().upper(),
        to_file=expect_bool(section.get("to_file", False), "log.to_file"),
        dir=expect_str(section.get("dir", "log"), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    check_choice(config.level, LOG_LEVELS, "log.level")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is set")
