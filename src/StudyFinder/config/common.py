"""Typed accessors shared by the `log`, `server` and `search` config sections.

Loaders raise TypeError for wrong value types and ValueError for missing
required keys; the `check_*` functions raise ValueError for out-of-range values.
"""

from __future__ import annotations

from typing import Any, Collection, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return the top-level section `key`, or {} when optional and absent.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config section: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be a mapping")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string, got {type(value).__name__}")
    return value


def expect_optional_str(value: Any, config_key: str) -> str | None:
    if value is None:
        return None
    return expect_str(value, config_key)


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be true or false")
    return value


def expect_int(value: Any, config_key: str) -> int:
    # YAML booleans are ints in Python; reject them explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def check_positive(value: int | float, config_key: str) -> None:
    """Raise ValueError unless `value` is greater than zero."""
    if value <= 0:
        raise ValueError(f"{config_key} must be positive, got {value}")


def check_choice(value: str, allowed: Collection[str], config_key: str) -> None:
    """Raise ValueError unless `value` is one of `allowed`."""
    if value not in allowed:
        raise ValueError(f"{config_key} must be one of {sorted(allowed)}, got {value!r}")
