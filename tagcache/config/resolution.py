"""Module: resolution.py

Date: 2026-10-19

Layered setting resolution.

A setting is looked up in an ordered list of resolvers and the first one
that knows the setting wins:

    environment variable  >  stored preference  >  built-in default

Everything here is a pure function of its explicit inputs (the environment
mapping and the preferences mapping are passed in, never read globally),
so callers and tests can build any precedence they need.

Usage:
    settings = CacheSettings.resolve(os.environ, load_preferences(prefs_path))
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from tagcache.config import app
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

ENV_PREFIX = "TAGCACHE_"


class SettingResolver(Protocol):
    """Something that may know the value of a named setting."""

    def lookup(self, name: str) -> Any | None:
        """Return the raw value for name, or None when absent."""
        ...


class EnvironmentResolver:
    """Resolve settings from environment variables (TAGCACHE_<NAME>)."""

    def __init__(self, environ: Mapping[str, str], prefix: str = ENV_PREFIX):
        self._environ = environ
        self._prefix = prefix

    def lookup(self, name: str) -> str | None:
        value = self._environ.get(f"{self._prefix}{name.upper()}")
        if value is None or not value.strip():
            return None
        return value.strip()


class PreferenceResolver:
    """Resolve settings from stored user preferences."""

    def __init__(self, preferences: Mapping[str, Any]):
        self._preferences = preferences

    def lookup(self, name: str) -> Any | None:
        return self._preferences.get(name)


class DefaultResolver:
    """Resolve settings from built-in defaults."""

    def __init__(self, defaults: Mapping[str, Any]):
        self._defaults = defaults

    def lookup(self, name: str) -> Any | None:
        return self._defaults.get(name)


def resolve_setting(name: str, resolvers: Iterable[SettingResolver]) -> Any | None:
    """Return the first non-absent value for name.

    Args:
        name: Setting name
        resolvers: Resolvers in precedence order (highest first)

    Returns:
        The winning raw value, or None if no resolver knows the setting

    """
    for resolver in resolvers:
        value = resolver.lookup(name)
        if value is not None:
            return value
    return None


def load_preferences(path: Path | str | None) -> dict[str, Any]:
    """Load stored preferences from a JSON file.

    A missing file yields no preferences. A corrupt file is logged and
    ignored so that a bad preferences file never prevents startup.

    Args:
        path: JSON file path (None means no stored preferences)

    Returns:
        Mapping of setting name to raw value

    """
    if path is None:
        return {}

    prefs_path = Path(path)
    if not prefs_path.exists():
        return {}

    try:
        with prefs_path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("[Preferences] Ignoring unreadable preferences %s: %s", prefs_path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("[Preferences] Ignoring preferences %s: not a JSON object", prefs_path)
        return {}

    return data


DEFAULTS: dict[str, Any] = {
    "cache_root": None,
    "fetch_max_workers": app.FETCH_MAX_WORKERS,
    "shutdown_grace_seconds": app.SHUTDOWN_GRACE_SECONDS,
    "log_level": app.LOG_LEVEL,
}


def _to_optional_int(value: Any) -> int | None:
    if value is None:
        return None
    number = int(value)
    if number <= 0:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return number


def _to_float(value: Any) -> float:
    number = float(value)
    if number < 0:
        raise ValueError(f"expected a non-negative number, got {value!r}")
    return number


def _to_optional_path(value: Any) -> Path | None:
    return None if value is None else Path(value).expanduser()


def _to_level(value: Any) -> str:
    return str(value).upper()


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "cache_root": _to_optional_path,
    "fetch_max_workers": _to_optional_int,
    "shutdown_grace_seconds": _to_float,
    "log_level": _to_level,
}


@dataclass(frozen=True)
class CacheSettings:
    """Resolved, typed settings for the cache subsystem."""

    cache_root: Path | None = None
    fetch_max_workers: int | None = app.FETCH_MAX_WORKERS
    shutdown_grace_seconds: float = app.SHUTDOWN_GRACE_SECONDS
    log_level: str = app.LOG_LEVEL

    @classmethod
    def resolve(
        cls,
        environ: Mapping[str, str] | None = None,
        preferences: Mapping[str, Any] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> CacheSettings:
        """Build settings from environment, preferences and defaults.

        Invalid values from a higher-precedence layer are logged and the
        next layer is consulted instead.

        Args:
            environ: Environment mapping (usually os.environ)
            preferences: Stored preferences (usually from load_preferences)
            defaults: Built-in defaults (DEFAULTS when None)

        Returns:
            CacheSettings instance

        """
        layers: list[SettingResolver] = [
            EnvironmentResolver(environ or {}),
            PreferenceResolver(preferences or {}),
        ]
        fallback = DefaultResolver(DEFAULTS if defaults is None else defaults)

        values: dict[str, Any] = {}
        for name, convert in _CONVERTERS.items():
            values[name] = cls._resolve_typed(name, convert, layers, fallback)

        return cls(**values)

    @staticmethod
    def _resolve_typed(
        name: str,
        convert: Callable[[Any], Any],
        layers: list[SettingResolver],
        fallback: DefaultResolver,
    ) -> Any:
        for resolver in layers:
            raw = resolver.lookup(name)
            if raw is None:
                continue
            try:
                return convert(raw)
            except (TypeError, ValueError) as e:
                logger.warning(
                    "[CacheSettings] Invalid value for %s from %s: %s",
                    name,
                    type(resolver).__name__,
                    e,
                )

        default = fallback.lookup(name)
        return None if default is None else convert(default)
