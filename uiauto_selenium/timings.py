# uiauto_selenium/timings.py
"""
@file timings.py
@brief Wait windows, timing presets and retry defaults.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


# element_wait: readiness wait before every element operation
# index_wait: wait for a list index to appear
TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "element_wait": {"timeout": 10.0, "interval": 0.2},
    "index_wait": {"timeout": 10.0, "interval": 0.1},
}

RETRY_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "element": {"max_attempts": 3, "delay_ms": 500, "verbose": True},
    "driver": {"max_attempts": 5, "delay_ms": 500, "verbose": True},
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "element_wait": {"timeout": 5.0, "interval": 0.1},
        "index_wait": {"timeout": 5.0, "interval": 0.1},
    },
    "slow": {
        "element_wait": {"timeout": 20.0, "interval": 0.2},
        "index_wait": {"timeout": 20.0, "interval": 0.2},
    },
    "ci": {
        "element_wait": {"timeout": 30.0, "interval": 0.2},
        "index_wait": {"timeout": 30.0, "interval": 0.2},
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **deepcopy(PRESET_OVERRIDES)}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = deepcopy(TIMEOUT_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        base = deepcopy(values[key])
        base.update(value)
        values[key] = base

    return values
