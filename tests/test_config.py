from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rules.config import ConfigError, format_filters, load_config, load_inputs
from scan.files import normalize_path

if TYPE_CHECKING:
    from pathlib import Path


def _repo(tmp_path: Path, name: str = "MyPatch", config: str | None = "") -> Path:
    root = tmp_path / name
    (root / "Ninja" / name).mkdir(parents=True)
    if config is not None:
        (root / ".validator.yml").write_text(config, encoding="utf-8")
    return root


def test_load_inputs_defaults_to_directory_name(tmp_path: Path) -> None:
    root = _repo(
        tmp_path,
        config="prefix: [MYP_, Foo]\nignore-declaration: Some_Symbol\n",
    )

    inputs = load_inputs(root)

    assert inputs.patch_name == "MyPatch"
    assert inputs.base_path == root / "Ninja" / "MyPatch"
    assert inputs.working_dir == root
    assert inputs.config.prefix == ["MYP_", "Foo"]
    assert inputs.config.ignore_declaration == ["Some_Symbol"]
    assert inputs.config.ignore_resource == []


def test_load_inputs_with_root_path_and_patch_name(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    (root / "game" / "ninja" / "other").mkdir(parents=True)
    (root / "game" / ".validator.yml").write_text("prefix: OTH\n", encoding="utf-8")

    inputs = load_inputs(root, patch_name="Other", root_path="game")

    assert inputs.base_path == root / "game" / "ninja" / "other"
    assert inputs.root_path == root / "game"
    assert inputs.config.prefix == ["OTH"]


def test_empty_config_file_is_allowed(tmp_path: Path) -> None:
    root = _repo(tmp_path, config="")

    assert load_inputs(root).config.prefix == []


def test_missing_base_path(tmp_path: Path) -> None:
    root = _repo(tmp_path)

    with pytest.raises(ConfigError, match="Base path 'Ninja/Other' not found"):
        load_inputs(root, patch_name="Other")


def test_missing_config_file(tmp_path: Path) -> None:
    root = _repo(tmp_path, config=None)

    with pytest.raises(ConfigError, match="Configuration file '.*\\.validator\\.yml' not found"):
        load_inputs(root)


def test_short_prefix_is_rejected(tmp_path: Path) -> None:
    root = _repo(tmp_path, config="prefix: [ABC, ab]\n")

    with pytest.raises(ConfigError, match="Prefix must be at least three characters long"):
        load_config(root)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    root = _repo(tmp_path, config="prefixes: [ABC]\n")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(root)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    root = _repo(tmp_path, config="prefix: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(root)


def test_format_filters(tmp_path: Path) -> None:
    base = tmp_path / "Ninja" / "patch1"

    filters = format_filters(
        "patch1",
        ["pre1_", "pre2"],
        ["foo"],
        ["_work\\data\\textures\\x.tex"],
        base,
    )

    assert filters.prefix == [
        "PATCH_PRE1",
        "PATCH_PRE2",
        "PATCH_PATCH1",
        "PRE1",
        "PRE2",
        "PATCH1",
    ]
    assert filters.ignore_declaration == ["FOO", "NINJA_PATCH1_INIT", "NINJA_PATCH1_MENU"]
    assert filters.ignore_resource == [
        normalize_path(tmp_path / "_work" / "data" / "textures" / "x.tex").upper()
    ]


def test_format_filters_removes_duplicates(tmp_path: Path) -> None:
    filters = format_filters("Test", ["test_", "TEST"], [], [], tmp_path / "Ninja" / "Test")

    assert filters.prefix == ["PATCH_TEST", "TEST"]
