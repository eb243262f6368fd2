"""Case-insensitive file system helpers.

Script sources are authored on case-insensitive file systems, so include
paths and resource globs are matched against the real directory entries
regardless of case.
"""

from __future__ import annotations

import os
import re
from fnmatch import fnmatchcase
from pathlib import Path

WILDCARDS = re.compile(r"[*?]")


def normalize_path(path: str | Path) -> str:
    """Return ``path`` with back-slashes replaced by forward slashes."""
    return str(path).replace("\\", "/")


def _match_entry(directory: Path, name: str) -> Path | None:
    candidate = directory / name
    if candidate.exists():
        return candidate
    try:
        entries = os.listdir(directory)
    except OSError:
        return None
    folded = name.casefold()
    for entry in sorted(entries):
        if entry.casefold() == folded:
            return directory / entry
    return None


def true_case_path(path: str | Path) -> Path | None:
    """Resolve ``path`` against the file system ignoring case.

    Returns the path as spelled on disk, or None if no entry matches.
    """
    path = Path(os.path.abspath(normalize_path(path)))
    if path.exists():
        return path

    current = Path(path.anchor)
    for part in path.parts[1:]:
        if part in ("", "."):
            continue
        if part == "..":
            current = current.parent
            continue
        match = _match_entry(current, part)
        if match is None:
            return None
        current = match
    return current


def _segment_matches(name: str, pattern: str) -> bool:
    return fnmatchcase(name.casefold(), pattern.casefold())


def glob_nocase(root: str | Path, pattern: str) -> list[str]:
    """Expand a relative glob ``pattern`` below ``root`` ignoring case.

    Supports ``*``, ``?`` and ``**`` segments. Returns matching file paths
    relative to ``root`` (POSIX separators), sorted for deterministic order.
    """
    root_path = Path(root)
    segments = [s for s in normalize_path(pattern).split("/") if s not in ("", ".")]
    matches: set[str] = set()

    def walk(directory: Path, index: int, rel: tuple[str, ...]) -> None:
        if index == len(segments):
            if directory.is_file():
                matches.add("/".join(rel))
            return
        segment = segments[index]
        if segment == "**":
            walk(directory, index + 1, rel)
            if directory.is_dir():
                for child in directory.iterdir():
                    if child.is_dir() and not child.is_symlink():
                        walk(child, index, (*rel, child.name))
            return
        if not directory.is_dir():
            return
        if WILDCARDS.search(segment) is None:
            child = _match_entry(directory, segment)
            if child is not None:
                walk(child, index + 1, (*rel, child.name))
            return
        for child in directory.iterdir():
            if _segment_matches(child.name, segment):
                walk(child, index + 1, (*rel, child.name))

    walk(root_path, 0, ())
    return sorted(matches)


def relative_posix(path: Path, base: Path | None) -> str:
    """Return ``path`` relative to ``base`` in POSIX form.

    Paths outside ``base`` are returned in full.
    """
    if base is not None:
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            pass
    return path.as_posix()


__all__ = [
    "WILDCARDS",
    "glob_nocase",
    "normalize_path",
    "relative_posix",
    "true_case_path",
]
