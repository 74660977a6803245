"""Remote catalog connection configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from StudyFinder.config.common import (
    check_choice,
    check_positive,
    expect_bool,
    expect_float,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
)
from StudyFinder.sources.registry import supported_source_kinds

_ALLOWED_KINDS = frozenset(supported_source_kinds())


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Store validated connection settings for the study catalog."""

    kind: str
    name: str
    qido_root: str
    supports_fuzzy_matching: bool
    supports_include_field: bool
    timeout: float
    auth_token_env: str | None


def load_server(raw: Mapping[str, Any]) -> ServerConfig:
    """Load server configuration from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "server", required=True)
    return ServerConfig(
        kind=expect_str(section.get("kind", "dicomweb"), "server.kind").strip().lower(),
        name=expect_str(section.get("name", "dicomweb"), "server.name"),
        qido_root=expect_str(get_required_value(section, "qido_root", "server.qido_root"), "server.qido_root"),
        supports_fuzzy_matching=expect_bool(
            section.get("supports_fuzzy_matching", False),
            "server.supports_fuzzy_matching",
        ),
        supports_include_field=expect_bool(
            section.get("supports_include_field", True),
            "server.supports_include_field",
        ),
        timeout=expect_float(section.get("timeout", 30), "server.timeout"),
        auth_token_env=expect_optional_str(section.get("auth_token_env"), "server.auth_token_env"),
    )


def check_server(config: ServerConfig) -> None:
    """Validate server domain constraints.

    Raises:
        ValueError: If values violate server constraints.
    """
    check_choice(config.kind, _ALLOWED_KINDS, "server.kind")
    if not config.qido_root.startswith(("http://", "https://")):
        raise ValueError("server.qido_root must be an http(s) URL")
    check_positive(config.timeout, "server.timeout")
    if config.auth_token_env is not None and not config.auth_token_env.strip():
        raise ValueError("server.auth_token_env must not be empty")
