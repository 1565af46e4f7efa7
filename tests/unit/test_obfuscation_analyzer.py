# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for rename-side scope analysis."""

from jsaudit import parse_source
from jsobf import ScopeIndex, analyze_scopes


def _index(source: str) -> ScopeIndex:
    return analyze_scopes(parse_source(source))


def _binding_ids(index: ScopeIndex, name: str) -> list[int]:
    return [
        occurrence.binding_id
        for occurrence in index.occurrences
        if occurrence.name == name
    ]


def test_obf_001_shadowed_names_get_distinct_bindings() -> None:
    index = _index("let a = 1;\nfunction f() { let a = 2; return a; }\nf(a);\n")

    names = [binding.name for binding in index.bindings]
    ids = _binding_ids(index, "a")

    assert names.count("a") == 2
    assert "f" in names
    assert ids == [ids[0], ids[1], ids[1], ids[0]]
    assert ids[0] != ids[1]


def test_obf_002_unresolved_references_are_globals() -> None:
    index = _index("console.log(x, undefinedThing);\n")

    assert index.bindings == ()
    assert index.occurrences == ()
    assert index.global_names == frozenset({"console", "x", "undefinedThing"})


def test_obf_003_var_is_hoisted_to_function_scope() -> None:
    index = _index(
        "function g() {\n  if (ok) { var v = 1; }\n  return v;\n}\n"
    )

    ids = _binding_ids(index, "v")

    assert len(ids) == 2
    assert ids[0] == ids[1]
    assert "v" not in index.global_names
    assert "ok" in index.global_names


def test_obf_004_let_is_block_scoped() -> None:
    index = _index("{ let b = 1; b; }\nb;\n")

    assert len(_binding_ids(index, "b")) == 2
    assert "b" in index.global_names


def test_obf_005_export_declarations_mark_bindings_exported() -> None:
    index = _index(
        "export const api = 1;\n"
        "export function run(arg) { return arg; }\n"
        "const local = 2;\n"
    )

    exported = {binding.name: binding.exported for binding in index.bindings}

    assert exported == {"api": True, "run": True, "arg": False, "local": False}


def test_obf_006_import_bindings_record_their_form() -> None:
    index = _index(
        'import def, { a, b as c } from "m";\nimport * as ns from "n";\n'
    )

    forms = {occurrence.name: occurrence.form for occurrence in index.occurrences}

    assert forms == {
        "def": "identifier",
        "a": "import_specifier",
        "c": "identifier",
        "ns": "identifier",
    }


def test_obf_007_reexports_and_property_names_are_not_occurrences() -> None:
    index = _index('export { x } from "m";\nconst o = { k: 1 };\no.k;\n')

    assert [occurrence.name for occurrence in index.occurrences] == ["o", "o"]
    assert index.global_names == frozenset()


def test_obf_008_destructuring_and_defaults_bind_every_name() -> None:
    index = _index(
        "function h({ p, q: [r, ...s] }, t = p) { return p + r + s + t; }\n"
    )

    names = sorted(binding.name for binding in index.bindings)
    forms = {occurrence.form for occurrence in index.occurrences if occurrence.name == "p"}

    assert names == ["h", "p", "r", "s", "t"]
    assert forms == {"shorthand_pattern", "identifier"}
    assert index.global_names == frozenset()


def test_obf_009_named_function_expression_binds_only_inside() -> None:
    index = _index("const f = function inner() { return inner; };\ninner;\n")

    assert len(_binding_ids(index, "inner")) == 2
    assert "inner" in index.global_names


def test_obf_010_long_expression_chain_is_indexed_without_recursion_limit() -> None:
    terms = 5000
    index = _index("const v = 1;\nlet s = " + " + ".join(["v"] * terms) + " + w;\n")

    assert len(_binding_ids(index, "v")) == terms + 1
    assert set(_binding_ids(index, "v")) == {0}
    assert index.global_names == frozenset({"w"})


def test_obf_011_export_flag_stays_on_the_declaration_itself() -> None:
    index = _index(
        "export const f = () => { var inner = 1; return inner; }, g = 2;\n"
        "var later = f;\n"
    )

    exported = {binding.name: binding.exported for binding in index.bindings}

    assert exported == {"f": True, "g": True, "inner": False, "later": False}
