"""Configuration management."""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class ConfigError(ValueError):
    """Exception raised when a configuration file cannot be used."""

    pass


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'workload': {
            'default_task_hours': 4.0,  # used when a task has no estimate
            'default_capacity_hours': 8.0,
        },
        'timeline': {
            'progress_fallback_duration_days': 30,
            'critical_task_ratio': 0.2,
        },
        'severity': {
            'low_max_days': 7,
            'medium_max_days': 21,
            'high_max_days': 45,
        },
        'load_levels': {
            'moderate_percent': 50,
            'elevated_percent': 70,
            'high_percent': 85,
            'overloaded_percent': 100,
        },
        'calendar': {
            'bottleneck_average_percent': 80,
            'high_risk_peak_percent': 120,
            'high_risk_overloaded_users': 1,
        },
    }


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration overrides from a YAML or JSON file and merge them
    onto the defaults.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        try:
            if path.suffix.lower() in ['.yaml', '.yml']:
                overrides = yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                overrides = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot parse config file {config_path}: {e}") from e

    if overrides is None:
        overrides = {}
    if not isinstance(overrides, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return merge_config(overrides)


def merge_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Deep-merge ``overrides`` onto a fresh copy of the default configuration."""
    config = get_default_config()
    if overrides:
        _deep_merge(config, overrides)
    return config


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
