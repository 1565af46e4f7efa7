# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for flat identifier resolution tracking."""

from jsaudit import FlatResolutionTracker


def test_res_001_declared_before_use_is_resolved() -> None:
    tracker = FlatResolutionTracker()

    tracker.observe_declaration("a")
    tracker.observe_identifier("a")

    assert tracker.unresolved_names() == []
    assert tracker.referenced_names == []


def test_res_002_references_are_deduplicated_in_first_occurrence_order() -> None:
    tracker = FlatResolutionTracker()

    for name in ["q", "p", "q", "r", "p"]:
        tracker.observe_identifier(name)

    assert tracker.unresolved_names() == ["q", "p", "r"]


def test_res_003_later_declaration_resolves_earlier_reference() -> None:
    tracker = FlatResolutionTracker()

    tracker.observe_identifier("y")
    tracker.observe_declaration("y")

    assert tracker.referenced_names == ["y"]
    assert tracker.unresolved_names() == []


def test_res_004_repeated_declaration_matches_single_declaration() -> None:
    once = FlatResolutionTracker()
    twice = FlatResolutionTracker()
    for tracker, repeats in ((once, 1), (twice, 2)):
        tracker.observe_identifier("u")
        for _ in range(repeats):
            tracker.observe_declaration("x")
        tracker.observe_identifier("x")
        tracker.observe_identifier("v")

    assert once.unresolved_names() == twice.unresolved_names() == ["u", "v"]
    assert twice.declared_names == ["x", "x"]
