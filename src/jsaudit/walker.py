# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-pass tree walker driving resolution tracking and pattern rules."""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from jsaudit.findings import DiagnosticAccumulator, Finding
from jsaudit.parser import SourceTree, declaration_kind
from jsaudit.patterns import detect_dynamic_evaluation, detect_literal_concatenation
from jsaudit.resolution import FlatResolutionTracker, ResolutionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Store the outcome of one analysis pass.

    Args:
        findings: Pattern findings in discovery order.
        unresolved_names: Referenced names never declared.
    """

    findings: tuple[Finding, ...]
    unresolved_names: tuple[str, ...]


class TreeWalker:
    """Walk the tree once, pre-order, feeding tracker and accumulator."""

    def __init__(
        self, accumulator: DiagnosticAccumulator, tracker: ResolutionTracker
    ) -> None:
        """Initialize walker collaborators.

        Args:
            accumulator: Destination for pattern findings.
            tracker: Identifier resolution tracker.
        """
        self._accumulator = accumulator
        self._tracker = tracker
        self._source = b""

    def walk(self, tree: SourceTree) -> None:
        """Traverse a parsed tree.

        The traversal keeps an explicit stack so nesting depth is bounded
        only by memory.

        Args:
            tree: Parsed source tree.
        """
        self._source = tree.source
        stack: list[Node] = [tree.root]
        while stack:
            node = stack.pop()
            stack.extend(reversed(self._visit(node)))

    def _visit(self, node: Node) -> list[Node]:
        """Apply the node's effects and return the children to walk next."""
        match node.type:
            case "identifier" | "shorthand_property_identifier" | "undefined":
                self._tracker.observe_identifier(self._text(node))
                return []
            case "variable_declarator":
                return self._visit_declarator(node)
            case "for_in_statement":
                return self._visit_for_in(node)
            case "call_expression":
                finding = detect_dynamic_evaluation(node, self._source)
                if finding is not None:
                    self._accumulator.add(finding)
                return _field_children(node, "arguments")
            case "binary_expression":
                finding = detect_literal_concatenation(node)
                if finding is not None:
                    self._accumulator.add(finding)
                return node.children
            case _:
                return node.children

    def _visit_declarator(self, node: Node) -> list[Node]:
        """Declare a plain-identifier target; only the initializer is walked."""
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._tracker.observe_declaration(self._text(name))
        return _field_children(node, "value")

    def _visit_for_in(self, node: Node) -> list[Node]:
        """Treat a declaring loop head like a declarator of its left side."""
        if declaration_kind(node) is None:
            return node.children
        left = node.child_by_field_name("left")
        if left is not None and left.type == "identifier":
            self._tracker.observe_declaration(self._text(left))
        return [
            child
            for index, child in enumerate(node.children)
            if node.field_name_for_child(index) != "left"
        ]

    def _text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")


def _field_children(node: Node, field_name: str) -> list[Node]:
    child = node.child_by_field_name(field_name)
    return [] if child is None else [child]


def analyze_tree(
    tree: SourceTree, tracker: ResolutionTracker | None = None
) -> AnalysisResult:
    """Run the analysis pass over a parsed tree.

    Args:
        tree: Parsed source tree.
        tracker: Optional resolution tracker; defaults to the flat tracker.

    Returns:
        Findings and unresolved names.
    """
    accumulator = DiagnosticAccumulator()
    resolution = tracker if tracker is not None else FlatResolutionTracker()
    TreeWalker(accumulator=accumulator, tracker=resolution).walk(tree)
    findings = tuple(accumulator.drain())
    unresolved = tuple(resolution.unresolved_names())
    logger.info(
        "Analysis finished (findings=%s unresolved=%s)", len(findings), len(unresolved)
    )
    return AnalysisResult(findings=findings, unresolved_names=unresolved)

