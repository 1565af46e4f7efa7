# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the analysis tree walker."""

from jsaudit import DiagnosticAccumulator, TreeWalker, analyze_tree, parse_source
from jsaudit.patterns import (
    DYNAMIC_EVALUATION_MESSAGE,
    LITERAL_CONCATENATION_MESSAGE,
)


class _RecordingTracker:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def observe_identifier(self, name: str) -> None:
        self.calls.append(("identifier", name))

    def observe_declaration(self, name: str) -> None:
        self.calls.append(("declaration", name))

    def unresolved_names(self) -> list[str]:
        return []


def _messages(source: str) -> list[str]:
    return [finding.message for finding in analyze_tree(parse_source(source)).findings]


def test_walk_001_eval_concat_and_undeclared_reference_in_order() -> None:
    result = analyze_tree(parse_source('eval("a" + "b"); let z = q;'))

    assert [finding.message for finding in result.findings] == [
        DYNAMIC_EVALUATION_MESSAGE,
        LITERAL_CONCATENATION_MESSAGE,
    ]
    assert result.unresolved_names == ("q",)


def test_walk_002_everything_declared_before_use_has_no_unresolved_names() -> None:
    source = "let a = 1;\nconst b = a * 2;\nvar c = [a, b];\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ()


def test_walk_003_forward_reference_at_top_level_resolves() -> None:
    source = "let x = y + 1;\nlet y = 2;\n"

    assert "y" not in analyze_tree(parse_source(source)).unresolved_names


def test_walk_004_self_reference_in_initializer_is_not_flagged() -> None:
    source = "var counter = counter || 0;\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ()


def test_walk_005_declaration_is_registered_before_initializer() -> None:
    tracker = _RecordingTracker()

    TreeWalker(accumulator=DiagnosticAccumulator(), tracker=tracker).walk(
        parse_source("let a = b;")
    )

    assert tracker.calls == [("declaration", "a"), ("identifier", "b")]


def test_walk_006_chained_concatenation_fires_once_per_literal_pair() -> None:
    assert _messages('let s = "a" + "b" + "c";') == [LITERAL_CONCATENATION_MESSAGE]
    assert _messages('let t = x + "b";') == []


def test_walk_007_nested_eval_calls_are_each_flagged() -> None:
    assert _messages('eval(eval("1"));') == [
        DYNAMIC_EVALUATION_MESSAGE,
        DYNAMIC_EVALUATION_MESSAGE,
    ]


def test_walk_008_property_names_are_not_references() -> None:
    source = "const o = { key: 1 };\no.other = o.key;\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ()


def test_walk_009_destructured_names_are_not_declarations() -> None:
    source = "const { a } = obj;\nlet b = a;\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ("obj", "a")


def test_walk_010_declaring_loop_head_declares_its_target() -> None:
    source = "const items = [];\nfor (const item of items) { item; }\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ()


def test_walk_011_shorthand_property_is_a_reference() -> None:
    assert analyze_tree(parse_source("let o = { width };")).unresolved_names == (
        "width",
    )


def test_walk_012_destructuring_loop_head_is_neither_declared_nor_observed() -> None:
    source = "const m = [];\nfor (const [k, v] of m) {}\nfor (let { w } in m) {}\n"

    assert analyze_tree(parse_source(source)).unresolved_names == ()


def test_walk_013_callees_are_not_references() -> None:
    source = (
        "let x = 1;\n"
        "console.log(x);\n"
        "window.setTimeout(go, 0);\n"
        "(pick || fallback)(x);\n"
    )

    assert analyze_tree(parse_source(source)).unresolved_names == ("go",)


def test_walk_014_undefined_is_an_undeclared_reference() -> None:
    assert analyze_tree(parse_source("let a = undefined;")).unresolved_names == (
        "undefined",
    )


def test_walk_015_long_concatenation_chain_is_walked_without_recursion_limit() -> None:
    terms = 5000
    source = "let s = " + " + ".join(['"a"'] * terms) + " + tail;\n"

    result = analyze_tree(parse_source(source))

    assert [finding.message for finding in result.findings] == [
        LITERAL_CONCATENATION_MESSAGE
    ]
    assert result.unresolved_names == ("tail",)
