from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest
import requests

from external import frameworks
from external.frameworks import (
    FrameworkCache,
    FrameworkDownloadError,
    lookup_framework,
)
from rules.checks import find_reference_violations
from scan.sources import resolve

IKARUS_FILES = {
    "Ikarus-gameversions/Ikarus_G1.src": "core/*.d\n",
    "Ikarus-gameversions/Ikarus_G2.src": "core/*.d\n",
    "Ikarus-gameversions/core/Ikarus_Core.d": (
        "func int MEM_ReadInt(var int address) {\n    return address;\n};\n"
    ),
    "Ikarus-gameversions/core/Ikarus_Const.d": "const int MEM_Const = 1;\n",
}


def _archive(files: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, text in files.items():
            data = text.encode("latin-1")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class _FakeResponse:
    def __init__(self, payload: bytes, status: int = 200) -> None:
        self.payload = payload
        self.status = status

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status >= 400:
            msg = f"{self.status} Client Error"
            raise requests.HTTPError(msg)

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.payload), chunk_size):
            yield self.payload[start : start + chunk_size]


@pytest.fixture
def fake_download(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    calls: list[str] = []

    def fake_get(url: str, **kwargs: object) -> _FakeResponse:
        calls.append(url)
        assert kwargs["stream"] is True
        return _FakeResponse(_archive(IKARUS_FILES))

    monkeypatch.setattr(frameworks.requests, "get", fake_get)
    return calls


def test_lookup_framework_is_case_insensitive() -> None:
    assert lookup_framework("ikarus") is lookup_framework("IKARUS")
    assert lookup_framework(" LeGo ") is not None
    assert lookup_framework("Unknown") is None


def test_fetch_downloads_once(tmp_path: Path, fake_download: list[str]) -> None:
    ikarus = lookup_framework("Ikarus")
    assert ikarus is not None

    cache = FrameworkCache(tmp_path / "cache")
    first = cache.fetch(ikarus, 2)
    second = cache.fetch(ikarus, 2)

    assert first == second
    assert first.is_file()
    assert first.name == "Ikarus_G2.src"
    assert fake_download == [ikarus.url]
    assert not (tmp_path / "cache" / "ikarus.tar.gz").exists()


def test_cache_removes_owned_directory() -> None:
    with FrameworkCache() as cache:
        directory = cache.directory
        assert directory.is_dir()

    assert not directory.exists()


def test_cache_keeps_provided_directory(tmp_path: Path) -> None:
    with FrameworkCache(tmp_path) as cache:
        assert cache.directory == tmp_path

    assert tmp_path.is_dir()


def test_fetch_wraps_http_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        frameworks.requests, "get", lambda url, **kwargs: _FakeResponse(b"", status=404)
    )
    lego = lookup_framework("LeGo")
    assert lego is not None

    with pytest.raises(FrameworkDownloadError, match="Failed to download"):
        FrameworkCache(tmp_path).fetch(lego, 2)


def test_fetch_wraps_connection_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail(url: str, **kwargs: object) -> _FakeResponse:
        msg = "offline"
        raise requests.ConnectionError(msg)

    monkeypatch.setattr(frameworks.requests, "get", fail)
    ikarus = lookup_framework("Ikarus")
    assert ikarus is not None

    with pytest.raises(FrameworkDownloadError, match="offline"):
        FrameworkCache(tmp_path).fetch(ikarus, 1)


def test_fetch_wraps_broken_archives(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        frameworks.requests, "get", lambda url, **kwargs: _FakeResponse(b"not a tarball")
    )
    ikarus = lookup_framework("Ikarus")
    assert ikarus is not None

    with pytest.raises(FrameworkDownloadError, match="Failed to extract"):
        FrameworkCache(tmp_path).fetch(ikarus, 2)


def test_framework_symbols_are_excluded(tmp_path: Path, fake_download: list[str]) -> None:
    base = tmp_path / "Ninja" / "Test"
    base.mkdir(parents=True)
    (base / "Content_G2.src").write_text("Ikarus\nuse.d\n", encoding="latin-1")
    (base / "use.d").write_text(
        "func void Test_Use() {\n    MEM_ReadInt(MEM_Const);\n};\n", encoding="latin-1"
    )

    with FrameworkCache(tmp_path / "cache") as cache:
        (unit,) = resolve("Test", base, tmp_path, cache=cache)

    by_name = {s.name: s for s in unit.symbol_table}
    assert by_name["MEM_READINT"].source_file == ""
    assert by_name["MEM_READINT.ADDRESS"].source_file == ""
    assert by_name["MEM_CONST"].source_file == ""
    assert by_name["ATR_HITPOINTS"].source_file == ""
    assert [s.name for s in unit.symbol_table if s.in_patch] == ["TEST_USE"]
    assert [r.name for r in unit.reference_table] == [
        "TEST_USE.MEM_READINT",
        "TEST_USE.MEM_CONST",
    ]
    assert find_reference_violations(unit.reference_table, unit.symbol_table) == []


def test_framework_requires_game_version(tmp_path: Path, fake_download: list[str]) -> None:
    base = tmp_path / "Ninja" / "Test"
    base.mkdir(parents=True)
    (base / "Content.src").write_text("Ikarus\n", encoding="latin-1")

    with FrameworkCache(tmp_path / "cache") as cache:
        (unit,) = resolve("Test", base, tmp_path, cache=cache)

    assert fake_download == []
    assert "ATR_HITPOINTS" not in {s.name for s in unit.symbol_table}


def _serve(monkeypatch: pytest.MonkeyPatch, *payloads: bytes) -> list[str]:
    calls: list[str] = []
    remaining = list(payloads)

    def fake_get(url: str, **kwargs: object) -> _FakeResponse:
        calls.append(url)
        return _FakeResponse(remaining.pop(0))

    monkeypatch.setattr(frameworks.requests, "get", fake_get)
    return calls


def test_fetch_creates_missing_cache_directory(
    tmp_path: Path, fake_download: list[str]
) -> None:
    ikarus = lookup_framework("Ikarus")
    assert ikarus is not None
    cache_dir = tmp_path / "nested" / "cache"

    entry = FrameworkCache(cache_dir).fetch(ikarus, 1)

    assert entry == cache_dir / "Ikarus-gameversions" / "Ikarus_G1.src"
    assert entry.is_file()


def test_failed_extraction_leaves_nothing_behind(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    unsafe = _archive(
        {
            "Ikarus-gameversions/Ikarus_G2.src": "core/*.d\n",
            "../escape.d": "const int Escape = 1;\n",
        }
    )
    calls = _serve(monkeypatch, unsafe, _archive(IKARUS_FILES))
    ikarus = lookup_framework("Ikarus")
    assert ikarus is not None
    cache = FrameworkCache(tmp_path / "cache")

    with pytest.raises(FrameworkDownloadError, match="Failed to extract"):
        cache.fetch(ikarus, 2)

    assert not (tmp_path / "cache" / "Ikarus-gameversions").exists()
    assert not (tmp_path / "cache" / "ikarus.tar.gz").exists()
    assert not (tmp_path / "escape.d").exists()

    assert cache.fetch(ikarus, 2).is_file()
    assert calls == [ikarus.url, ikarus.url]


def test_concurrent_units_share_one_download(
    tmp_path: Path, fake_download: list[str]
) -> None:
    base = tmp_path / "Ninja" / "Test"
    base.mkdir(parents=True)
    for name in ("Content_G1.src", "Content_G2.src"):
        (base / name).write_text("Ikarus\nuse.d\n", encoding="latin-1")
    (base / "use.d").write_text(
        "func void Test_Use() {\n    MEM_ReadInt(MEM_Const);\n};\n", encoding="latin-1"
    )

    with FrameworkCache(tmp_path / "cache") as cache:
        units = resolve("Test", base, tmp_path, cache=cache, jobs=2)

    assert fake_download == [lookup_framework("Ikarus").url]
    assert [unit.filename for unit in units] == ["Content_G1.src", "Content_G2.src"]
    for unit in units:
        names = {s.name for s in unit.symbol_table if not s.in_patch}
        assert {"MEM_READINT", "MEM_CONST", "ATR_HITPOINTS"} <= names
        assert [s.name for s in unit.symbol_table if s.in_patch] == ["TEST_USE"]
        assert find_reference_violations(unit.reference_table, unit.symbol_table) == []


def test_wildcard_matches_are_spliced_in_place(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    files = {
        "Ikarus-gameversions/Ikarus_G2.src": "first.d\ncore/*.d\nlast.d\n",
        "Ikarus-gameversions/first.d": "const int Fw_First = 1;\n",
        "Ikarus-gameversions/core/two.d": "const int Fw_Two = 3;\n",
        "Ikarus-gameversions/core/one.d": "const int Fw_One = 2;\n",
        "Ikarus-gameversions/last.d": "const int Fw_Last = 4;\n",
    }
    _serve(monkeypatch, _archive(files))
    base = tmp_path / "Ninja" / "Test"
    base.mkdir(parents=True)
    (base / "Content_G2.src").write_text("Ikarus\n", encoding="latin-1")

    with FrameworkCache(tmp_path / "cache") as cache:
        (unit,) = resolve("Test", base, tmp_path, cache=cache)

    assert [s.name for s in unit.symbol_table if s.name.startswith("FW_")] == [
        "FW_FIRST",
        "FW_ONE",
        "FW_TWO",
        "FW_LAST",
    ]
