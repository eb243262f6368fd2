"""Third-party script frameworks that patches may pull in by name.

A root source list may contain a bare line such as ``Ikarus`` or ``LeGo``.
The framework's source archive is downloaded once per run into a shared
temporary directory and its entry source list is parsed as excluded code.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 60
CHUNK_SIZE = 1 << 16


class FrameworkDownloadError(Exception):
    """Raised when a framework archive cannot be downloaded or extracted."""


@dataclass(frozen=True)
class Framework:
    name: str
    url: str
    entry: str
    provisional: tuple[str, ...] = ()

    def entry_for(self, version: int) -> str:
        return self.entry.format(version=version)

    @property
    def root(self) -> str:
        """Top-level directory of the extracted archive."""
        return self.entry.split("/", 1)[0]


FRAMEWORKS: dict[str, Framework] = {
    "IKARUS": Framework(
        name="IKARUS",
        url="https://github.com/Lehona/Ikarus/archive/refs/heads/gameversions.tar.gz",
        entry="Ikarus-gameversions/Ikarus_G{version}.src",
        provisional=(
            "DAM_INDEX_MAX",
            "PROT_INDEX_MAX",
            "ITM_TEXT_MAX",
            "ATR_HITPOINTS",
            "ATR_HITPOINTS_MAX",
            "ATR_MANA",
            "ATR_MANA_MAX",
            "PERC_ASSESSDAMAGE",
            "ITEM_KAT_NF",
            "ITEM_KAT_FF",
            "TRUE",
            "FALSE",
            "LOOP_CONTINUE",
            "LOOP_END",
            "ATT_FRIENDLY",
            "ATT_NEUTRAL",
            "ATT_ANGRY",
            "ATT_HOSTILE",
        ),
    ),
    "LEGO": Framework(
        name="LEGO",
        url="https://github.com/Lehona/LeGo/archive/refs/heads/gameversions.tar.gz",
        entry="LeGo-gameversions/Header_G{version}.src",
        provisional=("LEGO_MERGEFLAGS", "FOREACHPATCHHNDL"),
    ),
}


def lookup_framework(directive: str) -> Framework | None:
    """Return the framework named by a source-list directive, if any."""
    return FRAMEWORKS.get(directive.strip().upper())


class FrameworkCache:
    """Process-wide download directory shared by all parse units of a run.

    Use as a context manager; the directory is removed exactly once on exit.
    Fetches of the same framework are serialised so that concurrent units
    never race on extraction.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._owned = directory is None
        self._directory = directory
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @property
    def directory(self) -> Path:
        if self._directory is None:
            self._directory = Path(tempfile.mkdtemp(prefix="patch-validator-"))
            logger.debug("Created framework cache %s", self._directory)
        else:
            self._directory.mkdir(parents=True, exist_ok=True)
        return self._directory

    def __enter__(self) -> FrameworkCache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owned and self._directory is not None:
            shutil.rmtree(self._directory, ignore_errors=True)
            logger.debug("Removed framework cache %s", self._directory)
            self._directory = None

    def _lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(name, threading.Lock())

    def fetch(self, framework: Framework, version: int) -> Path:
        """Make sure the framework is extracted and return its entry file path.

        Raises:
            FrameworkDownloadError: On network, HTTP or archive failures
        """
        with self._lock_for(framework.name):
            entry = self.directory / framework.entry_for(version)
            if entry.exists():
                return entry

            logger.info("Downloading %s from %s", framework.name, framework.url)
            archive = self.directory / f"{framework.name.lower()}.tar.gz"
            try:
                _download(framework.url, archive)
                _extract(archive, self.directory)
            except FrameworkDownloadError:
                # A partial tree would pass the entry check on the next fetch.
                shutil.rmtree(self.directory / framework.root, ignore_errors=True)
                raise
            finally:
                archive.unlink(missing_ok=True)
            return entry


def _download(url: str, target: Path) -> None:
    try:
        with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as response:
            response.raise_for_status()
            with target.open("wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    except (requests.RequestException, OSError) as e:
        msg = f"Failed to download '{url}': {e}"
        raise FrameworkDownloadError(msg) from e


def _extract(archive: Path, directory: Path) -> None:
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(directory, filter="data")
    except (tarfile.TarError, OSError) as e:
        msg = f"Failed to extract '{archive.name}': {e}"
        raise FrameworkDownloadError(msg) from e


__all__ = [
    "FRAMEWORKS",
    "Framework",
    "FrameworkCache",
    "FrameworkDownloadError",
    "lookup_framework",
]
