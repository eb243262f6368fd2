from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scan.files import normalize_path, true_case_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".validator.yml"
NINJA_DIR = "Ninja"
MIN_PREFIX_LENGTH = 3
PATCH_PREFIX = "PATCH_"


class ConfigError(Exception):
    """Raised when the validator inputs or config file are unusable."""


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class ValidatorConfig(BaseModel):
    """Contents of ``.validator.yml`` at the patch root."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    prefix: list[str] = Field(
        default_factory=list,
        description="Name prefixes accepted for patch globals and resources",
    )
    ignore_declaration: list[str] = Field(
        default_factory=list,
        alias="ignore-declaration",
        description="Global symbol names exempt from the naming check",
    )
    ignore_resource: list[str] = Field(
        default_factory=list,
        alias="ignore-resource",
        description="Resource files (relative to the patch root) exempt from all checks",
    )

    @field_validator("prefix", "ignore_declaration", "ignore_resource", mode="before")
    @classmethod
    def coerce_to_list(cls, v: Any) -> Any:
        """Accept a single string wherever a list is expected."""
        return _as_list(v)


class ValidatorInputs(BaseModel):
    """Resolved run inputs."""

    working_dir: Path = Field(description="Repository root; file paths are reported relative to it")
    root_path: Path = Field(description="Absolute patch root holding the config file")
    base_path: Path = Field(description="Absolute directory holding the root source lists")
    patch_name: str
    config: ValidatorConfig = Field(default_factory=ValidatorConfig)


class Filters(BaseModel):
    """Prefix and ignore lists in the form the checks consume."""

    prefix: list[str] = Field(default_factory=list)
    ignore_declaration: list[str] = Field(default_factory=list)
    ignore_resource: list[str] = Field(default_factory=list)


def load_config(root: Path) -> ValidatorConfig:
    """Load ``.validator.yml`` from the patch root.

    Raises:
        ConfigError: If the file is missing, not valid YAML, has unknown
            keys or a prefix shorter than three characters
    """
    config_path = true_case_path(Path(root) / CONFIG_FILENAME)
    if config_path is None or not config_path.is_file():
        msg = f"Configuration file '{normalize_path(Path(root) / CONFIG_FILENAME)}' not found"
        raise ConfigError(msg)

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        config = ValidatorConfig.model_validate(data or {})
    except ValidationError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

    if any(len(prefix) < MIN_PREFIX_LENGTH for prefix in config.prefix):
        msg = "Prefix must be at least three characters long"
        raise ConfigError(msg)
    return config


def load_inputs(
    working_dir: str | Path,
    patch_name: str | None = None,
    root_path: str = "",
) -> ValidatorInputs:
    """Resolve the patch layout below ``working_dir`` and read its config.

    Args:
        working_dir: Repository root
        patch_name: Patch name; defaults to the repository directory name
        root_path: Patch root relative to ``working_dir``

    Raises:
        ConfigError: On a missing patch name, base path or config file
    """
    wd = Path(os.path.abspath(working_dir))
    name = patch_name or wd.name
    if not name:
        msg = "Patch name is not available. Please provide it with --patch-name"
        raise ConfigError(msg)

    rel_root = Path(os.path.normpath(normalize_path(root_path or ".")))
    rel_base = rel_root / NINJA_DIR / name
    base_path = true_case_path(wd / rel_base)
    if base_path is None or not base_path.is_dir():
        msg = f"Base path '{rel_base.as_posix()}' not found"
        raise ConfigError(msg)

    root = wd / rel_root
    config = load_config(root)
    return ValidatorInputs(
        working_dir=wd,
        root_path=Path(os.path.normpath(root)),
        base_path=base_path,
        patch_name=name,
        config=config,
    )


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def format_filters(
    patch_name: str,
    prefix_list: list[str],
    ignore_declaration: list[str],
    ignore_resource: list[str],
    base_path: str | Path,
) -> Filters:
    """Expand the configured lists into the upper-case filters the checks use.

    Prefixes lose any trailing underscore, gain the patch name and are also
    offered with a ``PATCH_`` prefix (those first). Declaration ignores gain
    the Ninja init and menu functions of the patch. Resource ignores become
    absolute, slash-normalised, upper-case paths below the patch root.
    """
    patch = patch_name.upper()
    stems = _unique([prefix.upper().rstrip("_") for prefix in [*prefix_list, patch]])
    prefix = _unique([f"{PATCH_PREFIX}{stem}" for stem in stems] + stems)

    ignore_decl = _unique(
        [name.upper() for name in ignore_declaration]
        + [f"NINJA_{patch}_INIT", f"NINJA_{patch}_MENU"]
    )

    root = Path(base_path).parent.parent
    ignore_rsc = _unique(
        [
            normalize_path(os.path.normpath(root / normalize_path(item))).upper()
            for item in ignore_resource
        ]
    )

    logger.info("Prefixes: %s", ", ".join(prefix))
    logger.info("Ignored declarations: %s", ", ".join(ignore_decl))
    if ignore_rsc:
        logger.info("Ignored resources: %s", ", ".join(ignore_rsc))
    return Filters(prefix=prefix, ignore_declaration=ignore_decl, ignore_resource=ignore_rsc)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "Filters",
    "ValidatorConfig",
    "ValidatorInputs",
    "format_filters",
    "load_config",
    "load_inputs",
]
