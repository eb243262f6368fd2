from __future__ import annotations

from pathlib import Path

import orjson

from contract.models import Reference, ResourceViolation, Symbol
from report.annotations import (
    build_annotations,
    naming_annotation,
    reference_annotation,
    suggest_prefixed,
)
from report.summary import RunSummary, build_summary
from report.table import format_duration, summary_table
from report.write import write_results
from rules.resources import ResourceCategory
from scan.sources import ParseUnit


def _unit(tmp_path: Path) -> ParseUnit:
    base = tmp_path / "Ninja" / "Test"
    base.mkdir(parents=True)
    (base / "Content_G2.src").write_text("", encoding="latin-1")
    unit = ParseUnit("Test", base / "Content_G2.src", tmp_path)
    unit.symbol_table.append(Symbol(name="FOO", source_file="Ninja/Test/a.d", line=2))
    unit.naming_violations = [unit.symbol_table[-1]]
    unit.reference_violations = [
        Reference(name="MISSING", source_file="Ninja/Test/a.d", line=3)
    ]
    (base / "a.d").write_text(
        "// header\nconst int Foo = 1;\nfunc void x() { Missing(); };\n",
        encoding="latin-1",
    )
    return unit


def _textures(tmp_path: Path) -> ResourceCategory:
    category = ResourceCategory(
        name="Textures",
        extensions=(".tex", ".fnt"),
        directory=tmp_path,
        working_dir=tmp_path,
        prefix=["TEST"],
        num_files=2,
    )
    category.ext_violations = [ResourceViolation(file="a/foo.bar", name=".bar")]
    return category


def test_suggest_prefixed_replaces_whole_words() -> None:
    line = "const int Foo = FooBar + foo;"

    assert suggest_prefixed(line, "FOO", "PATCH_") == (
        "const int PATCH_Foo = FooBar + PATCH_foo;"
    )


def test_naming_annotation_quotes_source_line(tmp_path: Path) -> None:
    (tmp_path / "a.d").write_text("var int x;\nconst int Foo = 1;\n", encoding="latin-1")
    symbol = Symbol(name="FOO", source_file="a.d", line=2)

    annotation = naming_annotation(symbol, ["PATCH_TEST", "TEST", "X", "Y"], tmp_path)

    assert annotation.title == "Naming convention violation: FOO"
    assert "(e.g. PATCH_TEST, TEST, X)" in annotation.message
    assert annotation.raw_details == "const int PATCH_TESTFoo = 1;"
    assert (annotation.start_line, annotation.end_line) == (2, 2)


def test_naming_annotation_tolerates_missing_file(tmp_path: Path) -> None:
    symbol = Symbol(name="FOO", source_file="gone.d", line=1)

    assert naming_annotation(symbol, ["TEST"], tmp_path).raw_details == ""


def test_reference_annotation_suggests_lookup() -> None:
    annotation = reference_annotation(Reference(name="NPC_X", source_file="a.d", line=4))

    assert annotation.title == "Reference violation: NPC_X"
    assert annotation.raw_details is not None
    assert 'MEM_FindParserSymbol("NPC_X")' in annotation.raw_details


def test_build_annotations_order(tmp_path: Path) -> None:
    unit = _unit(tmp_path)

    annotations = build_annotations([unit], [_textures(tmp_path)], ["TEST"], tmp_path)

    assert [a.title for a in annotations] == [
        "Naming convention violation: FOO",
        "Reference violation: MISSING",
        "Extension violation: .bar",
    ]


def test_build_summary_totals(tmp_path: Path) -> None:
    unit = _unit(tmp_path)

    summary = build_summary("Test", [unit], [_textures(tmp_path)], ["TEST"], 1.5)

    assert summary.num_symbols == 1
    assert summary.num_violations == 3
    assert not summary.passed
    assert summary.units[0].filename == "Content_G2.src"
    assert summary.units[0].naming_violations == 1
    assert summary.resources[0].extension_violations == 1


def test_write_results(tmp_path: Path) -> None:
    unit = _unit(tmp_path)
    summary = build_summary("Test", [unit], [], ["TEST"], 0.25)
    annotations = build_annotations([unit], [], ["TEST"], tmp_path)

    paths = write_results(tmp_path / "out", summary, annotations)

    data = orjson.loads(paths["summary"].read_bytes())
    assert data["patch_name"] == "Test"
    assert data["num_violations"] == 2
    assert data["schema_version"] == 1
    lines = paths["annotations"].read_bytes().splitlines()
    assert [orjson.loads(line)["start_line"] for line in lines] == [2, 3]


def test_console_tables() -> None:
    assert format_duration(0.0123) == "12 ms"
    assert format_duration(2.5) == "2.50 s"

    table = summary_table(RunSummary(patch_name="Test"))
    assert table.row_count == 0
    assert len(table.columns) == 7
