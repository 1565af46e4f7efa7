# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Parse JavaScript sources into tree-sitter syntax trees."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import tree_sitter_javascript as tsjs
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjs.language())
_parser = Parser(JS_LANGUAGE)

_DECLARATION_KINDS: frozenset[str] = frozenset({"var", "let", "const"})


class ParseError(RuntimeError):
    """Represent a JavaScript syntax error reported by the parser.

    Args:
        detail: Short description of the offending construct.
        line: 1-based line of the first error node.
        column: 1-based column of the first error node.
    """

    def __init__(self, detail: str, line: int, column: int) -> None:
        super().__init__(f"{detail} (línea {line}, columna {column})")
        self.detail = detail
        self.line = line
        self.column = column


@dataclass(frozen=True)
class SourceTree:
    """Hold parsed source bytes together with their syntax tree.

    Args:
        source: UTF-8 encoded source text.
        tree: Parsed tree-sitter tree.
    """

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        """Return the program node."""
        return self.tree.root_node

    def text(self, node: Node) -> str:
        """Return the source text covered by a node.

        Args:
            node: Node of this tree.

        Returns:
            Decoded node text.
        """
        return self.source[node.start_byte : node.end_byte].decode("utf-8")


def parse_source(source: str) -> SourceTree:
    """Parse JavaScript module source.

    Args:
        source: JavaScript source text.

    Returns:
        Parsed source tree.

    Raises:
        ParseError: If the source contains a syntax error.
    """
    encoded = source.encode("utf-8")
    tree = _parser.parse(encoded)
    if tree.root_node.has_error:
        error_node = _first_error_node(tree.root_node)
        row, column = error_node.start_point
        detail = _describe_error(error_node, encoded)
        logger.warning(
            "Parse failed (line=%s column=%s detail=%s)", row + 1, column + 1, detail
        )
        raise ParseError(detail=detail, line=row + 1, column=column + 1)
    return SourceTree(source=encoded, tree=tree)


def iter_error_nodes(node: Node) -> Iterator[Node]:
    """Yield error and missing nodes in pre-order.

    Args:
        node: Subtree root.

    Yields:
        Nodes flagged by the parser as erroneous or inserted.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            yield current
            continue
        stack.extend(
            child
            for child in reversed(current.children)
            if child.has_error or child.is_missing
        )


def _first_error_node(root: Node) -> Node:
    for node in iter_error_nodes(root):
        return node
    return root


def _describe_error(node: Node, source: bytes) -> str:
    if node.is_missing:
        return f"falta '{node.type}'"
    snippet = source[node.start_byte : node.end_byte].decode("utf-8", "replace")
    snippet = snippet.strip().splitlines()[0] if snippet.strip() else ""
    if len(snippet) > 40:
        snippet = f"{snippet[:40]}..."
    return f"token inesperado '{snippet}'"


def declaration_kind(node: Node) -> str | None:
    """Return the declaring keyword of a ``for ... in/of`` head.

    Args:
        node: A ``for_in_statement`` node.

    Returns:
        ``var``, ``let`` or ``const`` when the head declares its target.
    """
    kind = node.child_by_field_name("kind")
    if kind is not None and kind.type in _DECLARATION_KINDS:
        return kind.type
    for child in node.children:
        if child.type in _DECLARATION_KINDS:
            return child.type
    return None
