from __future__ import annotations

from contract.models import Reference, Symbol
from parse.parser import parse_to_tree
from parse.symbols import collect_symbols, extract_tables


def _names(entries: list[Symbol] | list[Reference]) -> list[tuple[str, int]]:
    return [(entry.name, entry.line) for entry in entries]


def test_scoping_inheritance_and_parameters() -> None:
    source = """class C {
    var int f;
};
prototype P(C) {
    f = 1;
};
func void Fn(var C p) {
    var int loc;
    p.f = loc;
};
"""
    symbols, references = extract_tables(source, file="a.d")

    assert _names(symbols) == [
        ("C", 1),
        ("C.F", 2),
        ("P", 4),
        ("P.F", 4),
        ("FN", 7),
        ("FN.P", 7),
        ("FN.P.F", 7),
        ("FN.LOC", 8),
    ]
    assert _names(references) == [
        ("C", 4),
        ("P.F", 5),
        ("FN.P.F", 9),
        ("FN.LOC", 9),
    ]
    assert all(entry.source_file == "a.d" for entry in [*symbols, *references])


def test_instances_inherit_through_prototypes() -> None:
    source = """class C_Thing {
    var string name;
    var int value;
};
prototype Proto(C_Thing) {
    value = 5;
};
instance Item1(Proto) {
    name = "x";
};
instance Item2, Item3(C_Thing);
"""
    symbols, references = extract_tables(source, file="items.d")
    names = [s.name for s in symbols]

    assert "PROTO.NAME" in names
    assert "ITEM1.NAME" in names
    assert "ITEM1.VALUE" in names
    assert "ITEM2.VALUE" in names
    assert "ITEM3.NAME" in names
    assert [r.name for r in references] == [
        "C_THING",
        "PROTO.VALUE",
        "PROTO",
        "ITEM1.NAME",
        "C_THING",
    ]
    assert references[-1].line == 11


def test_class_typed_globals_expose_members() -> None:
    symbols, _ = extract_tables("class C { var int hp; };\nvar C hero;\n")

    assert [s.name for s in symbols] == ["C", "C.HP", "HERO", "HERO.HP"]


def test_primitive_declarations_do_not_inherit() -> None:
    symbols, _ = extract_tables("class INT { var int x; };\nvar int counter;\n")

    assert "COUNTER.X" not in [s.name for s in symbols]


def test_references_in_calls_and_initialisers() -> None:
    source = """const int Size = 2;
const int Arr[Size] = {Other, 1};
func void Fn() {
    Print(IntToString(Arr[0]));
};
"""
    _, references = extract_tables(source)

    assert _names(references) == [
        ("SIZE", 2),
        ("OTHER", 2),
        ("FN.PRINT", 4),
        ("FN.INTTOSTRING", 4),
        ("FN.ARR", 4),
    ]


def test_collect_symbols_extends_existing_tables() -> None:
    symbols = [Symbol(name="C_NPC.NAME"), Symbol(name="C_NPC")]
    references: list[Reference] = []

    collect_symbols(
        parse_to_tree("instance Bob(C_NPC) { name = \"Bob\"; };"),
        symbols,
        references,
        file="bob.d",
    )

    bob = [s for s in symbols if s.name.startswith("BOB")]
    assert _names(bob) == [("BOB", 1), ("BOB.NAME", 1)]
    assert all(s.source_file == "bob.d" for s in bob)
    assert [r.name for r in references] == ["C_NPC", "BOB.NAME"]


def test_collect_symbols_in_nested_scope() -> None:
    symbols: list[Symbol] = []
    references: list[Reference] = []

    collect_symbols(parse_to_tree("var int x;"), symbols, references, scope="outer")

    assert [s.name for s in symbols] == ["OUTER.X"]
