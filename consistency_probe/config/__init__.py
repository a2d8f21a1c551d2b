"""
Configuration module for the consistency probe.

This module provides:
- Pydantic configuration models
- YAML configuration loading
- Configuration validation
"""

from consistency_probe.config.models import (
    ProbeConfig,
    RangeConfig,
    StorageConfig,
    FixtureConfig,
    ReportConfig,
)
from consistency_probe.config.loader import load_config
from consistency_probe.config.validation import ConfigurationError, validate_config

__all__ = [
    "ProbeConfig",
    "RangeConfig",
    "StorageConfig",
    "FixtureConfig",
    "ReportConfig",
    "ConfigurationError",
    "load_config",
    "validate_config",
]
