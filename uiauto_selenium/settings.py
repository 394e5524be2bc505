# uiauto_selenium/settings.py
"""
@file settings.py
@brief YAML settings file for retry, timing and logging.

Example:

    retry:
      max_attempts: 5
      delay_ms: 250
    timing:
      preset: ci
      overrides:
        index_wait: {timeout: 15}
    logging:
      timing: true
      actions: {enabled: true, format: jsonl, file: logs/actions.jsonl}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft202012Validator

from .actionlogger import ACTION_LOGGER
from .config import DEFAULT_DRIVER_RETRY, RetryConfig, TimeConfig
from .exceptions import ConfigError
from .timinglogger import TIMING_LOGGER

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas", "settings.schema.json")

_validator: Optional[Draft202012Validator] = None


def _get_validator() -> Draft202012Validator:
    global _validator
    if _validator is None:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            _validator = Draft202012Validator(json.load(f))
    return _validator


@dataclass(frozen=True)
class Settings:
    """Validated contents of a settings file."""
    retry: RetryConfig = DEFAULT_DRIVER_RETRY
    timing_preset: str = "default"
    timing_overrides: Dict[str, Any] = field(default_factory=dict)
    timing_log: bool = False
    action_log: Dict[str, Any] = field(default_factory=dict)

    def build_time_config(self) -> TimeConfig:
        return TimeConfig.build_from(preset=self.timing_preset, overrides=self.timing_overrides)

    def apply(self) -> None:
        """
        Install the timing snapshot as this thread's run config and switch the
        loggers on or off as configured.
        """
        TimeConfig.install_run_config(self.build_time_config())

        if self.timing_log:
            TIMING_LOGGER.enable()
        else:
            TIMING_LOGGER.disable()

        if self.action_log.get("enabled"):
            ACTION_LOGGER.configure(
                console=self.action_log.get("console", True),
                file_path=self.action_log.get("file"),
                format=self.action_log.get("format", "line"),
            )
            ACTION_LOGGER.enable()
        else:
            ACTION_LOGGER.disable()


def validate_settings(data: Any) -> None:
    """
    @throws ConfigError listing every schema violation
    """
    if not isinstance(data, dict):
        raise ConfigError("Settings must be a mapping at root")
    errors = sorted(_get_validator().iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = ["Settings schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def settings_from_dict(data: Dict[str, Any]) -> Settings:
    validate_settings(data)

    retry = DEFAULT_DRIVER_RETRY.with_overrides(**(data.get("retry") or {}))
    timing = data.get("timing") or {}
    logging_cfg = data.get("logging") or {}

    return Settings(
        retry=retry,
        timing_preset=timing.get("preset", "default"),
        timing_overrides=dict(timing.get("overrides") or {}),
        timing_log=bool(logging_cfg.get("timing", False)),
        action_log=dict(logging_cfg.get("actions") or {}),
    )


def load_settings(path: str) -> Settings:
    """
    Load and validate a YAML settings file.

    @param path Path to the YAML file
    @throws ConfigError if the file is missing, unparsable or invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read settings file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in settings file '{path}': {e}") from e
    return settings_from_dict(data)
