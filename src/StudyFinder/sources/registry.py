"""Source registry and builders for study catalogs."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from StudyFinder.config import ServerConfig
    from StudyFinder.services.execute import StudySource

SourceBuilder = Callable[["ServerConfig"], "StudySource"]


def build_source(config: ServerConfig) -> StudySource:
    """Build a study source for the configured server kind.

    Args:
        config: Parsed server configuration.

    Returns:
        StudySource: Initialized source implementation.

    Raises:
        ValueError: If ``config.kind`` is not registered.
    """
    builder = _source_builders().get(config.kind)
    if builder is None:
        raise ValueError(f"Unsupported source in config.server.kind: {config.kind}")
    return builder(config)


def supported_source_kinds() -> tuple[str, ...]:
    """Return all source kinds that can be built by the registry."""
    return tuple(_source_builders().keys())


def _source_builders() -> dict[str, SourceBuilder]:
    return {
        "dicomweb": _build_qido_source,
    }


def _build_qido_source(config: ServerConfig) -> StudySource:
    """Build DICOMweb QIDO-RS source."""
    from StudyFinder.sources.qido.client import QidoApiClient
    from StudyFinder.sources.qido.source import QidoSource

    auth_token = os.getenv(config.auth_token_env) if config.auth_token_env else None
    return QidoSource(
        client=QidoApiClient(config.qido_root, timeout=config.timeout, auth_token=auth_token),
        name=config.name,
        supports_include_field=config.supports_include_field,
    )
