"""Validation rules and configuration."""

from rules.checks import (
    find_naming_violations,
    find_overwrite_violations,
    find_reference_violations,
    validate_unit,
)
from rules.config import (
    ConfigError,
    Filters,
    ValidatorConfig,
    format_filters,
    load_config,
    load_inputs,
)
from rules.resources import ResourceCategory, validate_resources

__all__ = [
    "ConfigError",
    "Filters",
    "ResourceCategory",
    "ValidatorConfig",
    "find_naming_violations",
    "find_overwrite_violations",
    "find_reference_violations",
    "format_filters",
    "load_config",
    "load_inputs",
    "validate_resources",
    "validate_unit",
]
