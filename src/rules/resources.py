"""Naming and extension checks for asset files under ``_work/data``."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from contract.models import ResourceViolation
from scan.files import glob_nocase, normalize_path, relative_posix, true_case_path

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

RESOURCE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Anims": (".man", ".mdh", ".mdl", ".mdm", ".mmb", ".msb"),
    "Meshes": (".mrm", ".msh"),
    "Presets": (".zen",),
    "Sound": (".wav", ".mp3", ".ogg"),
    "Textures": (".tex", ".fnt"),
    "Worlds": (".zen",),
}

# Placeholder files accepted in every category.
UNIVERSAL_IGNORE = (".txt", ".md", ".empty")

# Animation names are generated by the engine.
UNPREFIXED_CATEGORIES = frozenset({"anims"})


def data_path(base_path: str | Path) -> Path:
    """``_work/data`` relative to the patch's source-list directory."""
    return Path(os.path.normpath(Path(base_path) / ".." / ".." / "_work" / "data"))


@dataclass
class ResourceCategory:
    name: str
    extensions: tuple[str, ...]
    directory: Path
    working_dir: Path
    prefix: list[str]
    ignore: frozenset[str] = frozenset()

    num_files: int = 0
    duration: float = 0.0
    ext_violations: list[ResourceViolation] = field(default_factory=list)
    name_violations: list[ResourceViolation] = field(default_factory=list)

    def validate(self) -> ResourceCategory:
        start = time.perf_counter()
        directory = true_case_path(self.directory) or self.directory
        files = glob_nocase(directory, "**/*")
        self.num_files = len(files)
        allowed = {*self.extensions, *UNIVERSAL_IGNORE}

        for rel in files:
            path = directory / rel
            if normalize_path(path).upper() in self.ignore:
                continue

            file = relative_posix(path, self.working_dir)
            extension = path.suffix
            base_name = path.stem
            if extension and extension.lower() not in allowed:
                self.ext_violations.append(ResourceViolation(file=file, name=extension))
                continue

            if self.name.lower() in UNPREFIXED_CATEGORIES:
                continue
            if extension.lower() in UNIVERSAL_IGNORE:
                continue
            if not any(prefix in base_name.upper() for prefix in self.prefix):
                self.name_violations.append(ResourceViolation(file=file, name=base_name))

        self.duration = time.perf_counter() - start
        return self


def validate_resources(
    working_dir: str | Path,
    base_path: str | Path,
    prefix: list[str],
    ignore: Iterable[str] = (),
) -> list[ResourceCategory]:
    """Check every resource category; categories without files are dropped.

    Args:
        working_dir: Directory violation paths are reported relative to
        base_path: Directory holding the patch's root source lists
        prefix: Upper-case prefixes a resource base name must contain
        ignore: Upper-case absolute paths to skip

    Returns:
        Validated categories that contain at least one file
    """
    wd = Path(os.path.abspath(working_dir))
    data = data_path(os.path.abspath(base_path))
    ignored = frozenset(normalize_path(item).upper() for item in ignore)

    results: list[ResourceCategory] = []
    for name, extensions in RESOURCE_CATEGORIES.items():
        category = ResourceCategory(
            name=name,
            extensions=extensions,
            directory=data / name.lower(),
            working_dir=wd,
            prefix=prefix,
            ignore=ignored,
        ).validate()
        if category.num_files > 0:
            logger.info(
                "%s: %d file(s), %d extension and %d naming violation(s)",
                name,
                category.num_files,
                len(category.ext_violations),
                len(category.name_violations),
            )
            results.append(category)
    return results


__all__ = [
    "RESOURCE_CATEGORIES",
    "UNIVERSAL_IGNORE",
    "ResourceCategory",
    "data_path",
    "validate_resources",
]
