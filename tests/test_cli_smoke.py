from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
import pytest

from cli import main, run_validation

if TYPE_CHECKING:
    from pathlib import Path


def _write_patch(root: Path, files: dict[str, str], config: str = "prefix: []\n") -> Path:
    base = root / "Ninja" / root.name
    base.mkdir(parents=True)
    (root / ".validator.yml").write_text(config, encoding="utf-8")
    for name, text in files.items():
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="latin-1")
    return base


def test_cli_validate_clean_patch(tmp_path: Path) -> None:
    repo_root = tmp_path / "Clean"
    _write_patch(
        repo_root,
        {
            "Content_G2.src": "clean.d\n",
            "clean.d": "func void Clean_Init() {\n    Print(\"hello\");\n};\n",
        },
    )

    out_dir = tmp_path / "results"
    exit_code = main(["validate", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    summary = orjson.loads((out_dir / "summary.json").read_bytes())
    assert summary["num_violations"] == 0
    assert summary["num_symbols"] == 1
    assert summary["prefixes"] == ["PATCH_CLEAN", "CLEAN"]
    assert (out_dir / "annotations.jsonl").read_bytes() == b""


def test_cli_validate_reports_violations(tmp_path: Path) -> None:
    repo_root = tmp_path / "Bad"
    _write_patch(
        repo_root,
        {
            "Content_G2.src": "bad.d\n",
            "bad.d": (
                "const int Init_Global = 0;\n"
                "func void Foo() {\n"
                "    Undefined_Thing();\n"
                "};\n"
            ),
        },
    )

    out_dir = tmp_path / "results"
    exit_code = main(["validate", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 1
    summary = orjson.loads((out_dir / "summary.json").read_bytes())
    assert summary["num_violations"] == 4
    titles = [
        orjson.loads(line)["title"]
        for line in (out_dir / "annotations.jsonl").read_bytes().splitlines()
    ]
    assert titles == [
        "Naming convention violation: INIT_GLOBAL",
        "Naming convention violation: FOO",
        "Reference violation: FOO.UNDEFINED_THING",
        "Overwrite violation: INIT_GLOBAL",
    ]


def test_cli_validate_resources(tmp_path: Path) -> None:
    repo_root = tmp_path / "Res"
    _write_patch(repo_root, {"Menu_G2.src": ""}, config="prefix: RSC\n")
    textures = repo_root / "_work" / "data" / "textures"
    textures.mkdir(parents=True)
    (textures / "wall.tex").write_bytes(b"")
    (textures / "RSC_Floor.tex").write_bytes(b"")

    result = run_validation(repo_root)

    assert [r.name for r in result.summary.resources] == ["Textures"]
    assert [a.title for a in result.annotations] == ["Naming convention violation: wall"]


def test_cli_missing_config_exits_with_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "NoConfig"
    (repo_root / "Ninja" / "NoConfig").mkdir(parents=True)

    exit_code = main(["validate", str(repo_root)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert "Configuration file" in captured.err


def test_cli_wildcard_exits_with_error(tmp_path: Path) -> None:
    repo_root = tmp_path / "Wild"
    _write_patch(repo_root, {"Content_G1.src": "*.d\n"})

    assert main(["validate", str(repo_root)]) == 2


def test_cli_patch_name_and_root_path(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    patch_root = repo_root / "game"
    base = patch_root / "Ninja" / "Other"
    base.mkdir(parents=True)
    (patch_root / ".validator.yml").write_text("prefix: OTH\n", encoding="utf-8")
    (base / "Content_G1.src").write_text("o.d\n", encoding="latin-1")
    (base / "o.d").write_text("var int Oth_Value;\n", encoding="latin-1")

    exit_code = main(
        ["validate", str(repo_root), "--patch-name", "Other", "--root-path", "game"]
    )

    assert exit_code == 0


def test_cli_symbols_lists_patch_symbols(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "Sym"
    _write_patch(
        repo_root,
        {"Content_G1.src": "s.d\n", "s.d": "var int Sym_Counter;\n"},
    )

    exit_code = main(["symbols", str(repo_root)])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "SYM_COUNTER" in captured.out


def test_cli_unexpected_error_exits_with_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "Broken"
    _write_patch(repo_root, {"Content_G2.src": ""})

    def fail(*args: object, **kwargs: object) -> None:
        msg = "denied"
        raise PermissionError(msg)

    monkeypatch.setattr("cli.run_validation", fail)

    assert main(["validate", str(repo_root)]) == 2
    assert "denied" in capsys.readouterr().err
