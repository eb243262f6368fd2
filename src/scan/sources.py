"""Root source-list discovery and per-root parsing.

A patch ships one or more root source lists (``Content_G2.src``,
``Menu_G1.src``, ...) under its base path. Each root becomes a
``ParseUnit`` holding the symbol and reference tables of every
declaration file reachable from it.
"""

from __future__ import annotations

import logging
import os
import re
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from contract.models import Reference, Symbol
from external.builtins import builtin_symbols, external_names, required_names
from external.frameworks import lookup_framework
from parse.parser import parse_to_tree
from parse.symbols import collect_symbols
from scan.files import (
    WILDCARDS,
    glob_nocase,
    normalize_path,
    relative_posix,
    true_case_path,
)

if TYPE_CHECKING:
    from external.frameworks import FrameworkCache

logger = logging.getLogger(__name__)

CATEGORIES = ("Content", "Menu", "PFX", "SFX", "VFX", "Music", "Camera", "Fight")
VERSION_SUFFIXES = ("_G1", "_G112", "_G130", "_G2", "")

SOURCE_LIST_EXT = ".SRC"
DECLARATION_EXT = ".D"
SOURCE_ENCODING = "latin-1"

_VERSION_SUFFIX = re.compile(r"_G(\d+)$", re.IGNORECASE)


class UnsupportedWildcardError(Exception):
    """Raised when a patch source list contains a wildcard line."""


def root_candidates() -> list[str]:
    """File names of every possible root source list, in discovery order."""
    return [
        f"{category}{suffix}.src"
        for category in CATEGORIES
        for suffix in VERSION_SUFFIXES
    ]


class ParseUnit:
    """Symbol and reference tables collected from one root source list.

    Attributes:
        patch_name: Upper-cased patch name
        filepath: Path of the root source list as spelled on disk
        type: Category derived from the file name (``CONTENT``, ``MENU``, ...)
        version: Game version from the ``_G<n>`` suffix, or -1
    """

    def __init__(
        self,
        patch_name: str,
        filepath: str | Path,
        working_dir: str | Path,
        *,
        cache: FrameworkCache | None = None,
    ) -> None:
        self.patch_name = patch_name.upper()
        self.working_dir = Path(os.path.abspath(working_dir))
        resolved = true_case_path(filepath)
        self.exists = resolved is not None and resolved.is_file()
        self.filepath = resolved if resolved is not None else Path(filepath)
        self.filename = self.filepath.name

        stem = self.filepath.stem
        match = _VERSION_SUFFIX.search(stem)
        self.version = int(match.group(1)) if match else -1
        self.type = _VERSION_SUFFIX.sub("", stem).upper()

        self.cache = cache
        self.symbol_table: list[Symbol] = []
        self.reference_table: list[Reference] = []
        self.visited_files: set[str] = set()
        self.visited_sources: set[Path] = set()

        self.naming_violations: list[Symbol] = []
        self.reference_violations: list[Reference] = []
        self.overwrite_violations: list[Symbol] = []
        self.duration = 0.0

    def __repr__(self) -> str:
        return f"ParseUnit({self.filename!r}, type={self.type!r}, version={self.version})"

    @property
    def num_symbols(self) -> int:
        return sum(1 for symbol in self.symbol_table if symbol.in_patch)

    @property
    def relative_path(self) -> str:
        return relative_posix(self.filepath, self.working_dir)

    def parse(self) -> ParseUnit:
        """Seed built-ins and parse the root source list."""
        start = time.perf_counter()
        self._seed_externals()
        self._seed_required()
        self._parse_src(self.filepath, root=True, exclude=False)
        self.duration = time.perf_counter() - start

        logger.info(
            "Parsed %s: %d patch symbols, %d references (%.2fs)",
            self.filename,
            self.num_symbols,
            len(self.reference_table),
            self.duration,
        )
        if logger.isEnabledFor(logging.DEBUG):
            for symbol in self.symbol_table:
                if symbol.in_patch:
                    logger.debug(
                        "%s: %s (%s:%d)",
                        self.filename,
                        symbol.name,
                        symbol.source_file,
                        symbol.line,
                    )
        return self

    def _seed_externals(self) -> None:
        self.symbol_table.extend(builtin_symbols(external_names(self.type, self.version)))

    def _seed_required(self) -> None:
        names = required_names(self.type, self.version, self.patch_name)
        self.symbol_table.extend(builtin_symbols(names))

    def _parse_src(self, path: Path, *, root: bool, exclude: bool) -> None:
        """Walk a source list, dispatching each line by its extension.

        Raises:
            UnsupportedWildcardError: If a non-excluded list contains a wildcard
        """
        resolved = true_case_path(path)
        if resolved is None or not resolved.is_file():
            logger.debug("Skipping missing source list %s", path)
            return
        if resolved in self.visited_sources:
            logger.debug("Skipping repeated source list %s", resolved)
            return
        self.visited_sources.add(resolved)

        directory = resolved.parent
        text = resolved.read_text(encoding=SOURCE_ENCODING)
        lines = deque(
            normalize_path(line.strip())
            for line in text.splitlines()
            if line.strip() and not line.strip().startswith("//")
        )

        while lines:
            line = lines.popleft()
            if WILDCARDS.search(line):
                if not exclude:
                    msg = "Wildcards are not supported"
                    raise UnsupportedWildcardError(msg)
                lines.extendleft(reversed(glob_nocase(directory, line)))
                continue

            extension = Path(line).suffix.upper()
            if extension == DECLARATION_EXT:
                self._parse_d(directory / line, exclude=exclude)
            elif extension == SOURCE_LIST_EXT:
                self._parse_src(directory / line, root=False, exclude=exclude)
            elif root:
                self._parse_special(line)

    def _parse_d(self, path: Path, *, exclude: bool) -> None:
        resolved = true_case_path(path)
        if resolved is None or not resolved.is_file():
            logger.debug("Skipping missing declaration file %s", path)
            return

        relative = relative_posix(resolved, self.working_dir)
        if relative in self.visited_files:
            return
        self.visited_files.add(relative)

        tree = parse_to_tree(resolved.read_text(encoding=SOURCE_ENCODING))
        for error in tree.errors:
            logger.debug("%s: %s", relative, error)

        # Excluded code contributes declarations only.
        references: list[Reference] = [] if exclude else self.reference_table
        collect_symbols(
            tree,
            self.symbol_table,
            references,
            file="" if exclude else relative,
        )

    def _parse_special(self, directive: str) -> None:
        if self.type != "CONTENT":
            return
        framework = lookup_framework(directive)
        if framework is None:
            logger.debug("Ignoring unknown directive %r in %s", directive, self.filename)
            return
        if self.version < 0:
            logger.warning(
                "Cannot load %s for %s without a game version suffix",
                framework.name,
                self.filename,
            )
            return
        if self.cache is None:
            logger.warning("No framework cache available, skipping %s", framework.name)
            return

        entry = self.cache.fetch(framework, self.version)
        self._parse_src(entry, root=False, exclude=True)
        self.symbol_table.extend(builtin_symbols(framework.provisional))


def resolve(
    patch_name: str,
    base_path: str | Path,
    working_dir: str | Path,
    *,
    cache: FrameworkCache | None = None,
    jobs: int = 1,
) -> list[ParseUnit]:
    """Discover the root source lists under ``base_path`` and parse each.

    Args:
        patch_name: Patch name used for the Ninja helper symbols
        base_path: Directory holding the root source lists
        working_dir: Directory that ``source_file`` entries are relative to
        cache: Shared download cache for framework directives
        jobs: Number of root units parsed concurrently

    Returns:
        One parsed unit per existing root, in discovery order
    """
    base = Path(base_path)
    units = [
        ParseUnit(patch_name, base / name, working_dir, cache=cache)
        for name in root_candidates()
    ]
    units = [unit for unit in units if unit.exists]
    logger.info(
        "Found %d root source list(s): %s",
        len(units),
        ", ".join(unit.filename for unit in units),
    )

    if jobs > 1 and len(units) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            list(pool.map(ParseUnit.parse, units))
    else:
        for unit in units:
            unit.parse()
    return units


__all__ = [
    "CATEGORIES",
    "VERSION_SUFFIXES",
    "ParseUnit",
    "UnsupportedWildcardError",
    "resolve",
    "root_candidates",
]
