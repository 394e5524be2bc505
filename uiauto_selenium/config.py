# uiauto_selenium/config.py
"""
@file config.py
@brief Wait window configuration and retry settings.

TimeConfig holds the process-wide wait windows (readiness wait and list index
wait). RetryConfig is the immutable per-handle retry budget that every
derived handle inherits from the handle that produced it.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, replace
from typing import Any, Dict, Generator, Optional

from .exceptions import ConfigError
from .timings import (RETRY_DEFAULTS, TIMEOUT_FIELDS, build_preset_values,
                      list_presets)


@dataclass
class TimeoutSettings:
    """Timeout and polling interval for one kind of wait."""
    timeout: float
    interval: float

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
    ) -> TimeoutSettings:
        """Create a new settings instance with overrides applied."""
        return TimeoutSettings(
            timeout=timeout if timeout is not None else self.timeout,
            interval=interval if interval is not None else self.interval,
        )


@dataclass(frozen=True)
class RetryConfig:
    """
    Stale-retry budget of a resilient handle.

    @param max_attempts Total attempts, at least one
    @param delay_ms Pause between attempts in milliseconds
    @param verbose Emit diagnostic log records for waits and retries
    """
    max_attempts: int = 3
    delay_ms: int = 500
    verbose: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ConfigError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if isinstance(self.delay_ms, bool) or not isinstance(self.delay_ms, int):
            raise ConfigError(f"delay_ms must be an integer, got {self.delay_ms!r}")
        if self.delay_ms < 0:
            raise ConfigError(f"delay_ms must be >= 0, got {self.delay_ms}")

    @property
    def delay(self) -> float:
        """Pause between attempts in seconds."""
        return self.delay_ms / 1000.0

    def with_overrides(
        self,
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None,
        verbose: Optional[bool] = None,
    ) -> RetryConfig:
        changes: Dict[str, Any] = {}
        if max_attempts is not None:
            changes["max_attempts"] = max_attempts
        if delay_ms is not None:
            changes["delay_ms"] = delay_ms
        if verbose is not None:
            changes["verbose"] = verbose
        return replace(self, **changes)


DEFAULT_ELEMENT_RETRY = RetryConfig(**RETRY_DEFAULTS["element"])
DEFAULT_DRIVER_RETRY = RetryConfig(**RETRY_DEFAULTS["driver"])


class TimeConfig:
    """
    Wait window configuration for the framework.

    Lookup order for current(): per-thread run config, then the per-thread
    override() context, then the process default.
    """

    _default_instance: Optional[TimeConfig] = None
    _default_preset: str = "default"
    _local = threading.local()
    _lock = threading.Lock()

    def __init__(self, preset: Optional[str] = None):
        preset_name = preset or self._default_preset
        self._apply_values(build_preset_values(preset_name))

    @classmethod
    def _timeout_fields(cls) -> Dict[str, Dict[str, Any]]:
        return TIMEOUT_FIELDS

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in self._timeout_fields():
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                )
            else:
                raise ValueError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in self._timeout_fields():
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {"timeout": setting.timeout, "interval": setting.interval}
        return data

    def clone(self) -> TimeConfig:
        """Return a deep clone of this config."""
        clone = TimeConfig()
        clone._apply_values(self.to_dict())
        return clone

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a run-scope config snapshot: preset first, then overrides."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg

    @classmethod
    def default(cls) -> TimeConfig:
        """Get the process default configuration (singleton)."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls(cls._default_preset)
        return cls._default_instance

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        """Install per-thread run configuration snapshot."""
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        """Clear per-thread run configuration snapshot."""
        cls._local.run_config = None

    @classmethod
    def current(cls) -> TimeConfig:
        """Get the current effective configuration."""
        run_cfg = getattr(cls._local, "run_config", None)
        if run_cfg is not None:
            return run_cfg

        override = getattr(cls._local, "override", None)
        if override is not None:
            return override

        return cls.default()

    @classmethod
    def apply_preset(cls, preset: str) -> None:
        """Apply a preset to the current run-scope config."""
        base = cls.current().clone()
        base._apply_values(build_preset_values(preset))
        cls.install_run_config(base)

    @classmethod
    def apply_overrides(cls, overrides: Dict[str, Any]) -> None:
        """Apply overrides to the current run-scope config."""
        config = cls.current().clone()
        _apply_overrides(config, overrides)
        cls.install_run_config(config)

    @classmethod
    @contextmanager
    def override(cls, **kwargs: Any) -> Generator[TimeConfig, None, None]:
        """Context manager for temporary configuration overrides."""
        previous = getattr(cls._local, "override", None)
        new_config = cls.current().clone()
        _apply_overrides(new_config, kwargs)

        cls._local.override = new_config
        try:
            yield new_config
        finally:
            cls._local.override = previous

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Reset default and clear all thread-local config state."""
        with cls._lock:
            cls._default_preset = "default"
            cls._default_instance = cls(cls._default_preset)
        cls._local.override = None
        cls._local.run_config = None


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key not in config._timeout_fields():
            raise ValueError(f"Unknown TimeConfig field: {key}")
        base_setting: TimeoutSettings = getattr(config, key)
        if isinstance(value, TimeoutSettings):
            setattr(config, key, deepcopy(value))
        elif isinstance(value, dict):
            setattr(config, key, base_setting.with_overrides(
                timeout=value.get("timeout"),
                interval=value.get("interval"),
            ))
        else:
            raise ValueError(f"Invalid override for {key}: {value}")


def configure_for_ci() -> None:
    """Use the long CI wait windows for this thread's run."""
    TimeConfig.apply_preset("ci")


def configure_for_local_dev() -> None:
    """Use the short wait windows for this thread's run."""
    TimeConfig.apply_preset("fast")


def configure_for_slow() -> None:
    TimeConfig.apply_preset("slow")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()
