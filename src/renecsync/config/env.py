"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when unset/blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def optional_env_path(name: str) -> Path | None:
    value = optional_env_var(name)
    if value is None:
        return None
    return Path(value).expanduser()


def optional_env_int(name: str, *, minimum: int = 1) -> int | None:
    """Return an integer environment override, raising if it is malformed."""

    value = optional_env_var(name)
    if value is None:
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed
