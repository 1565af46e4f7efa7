# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Suspicious-pattern rules evaluated on single syntax nodes."""

from tree_sitter import Node

from jsaudit.findings import Finding

DYNAMIC_EVALUATION_NAME = "eval"
DYNAMIC_EVALUATION_MESSAGE = "Uso de eval detectado, posible riesgo de seguridad"
LITERAL_CONCATENATION_MESSAGE = "Concatenación de strings literales detectada"


def detect_dynamic_evaluation(node: Node, source: bytes) -> Finding | None:
    """Flag calls whose callee is the bare ``eval`` identifier.

    Args:
        node: A ``call_expression`` node.
        source: Source bytes the node was parsed from.

    Returns:
        Finding when the rule matches.
    """
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return None
    name = source[callee.start_byte : callee.end_byte].decode("utf-8")
    if name != DYNAMIC_EVALUATION_NAME:
        return None
    return Finding(message=DYNAMIC_EVALUATION_MESSAGE)


def detect_literal_concatenation(node: Node) -> Finding | None:
    """Flag ``+`` expressions whose operands are both string literals.

    Args:
        node: A ``binary_expression`` node.

    Returns:
        Finding when the rule matches.
    """
    operator = node.child_by_field_name("operator")
    if operator is None or operator.type != "+":
        return None
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None:
        return None
    if left.type == "string" and right.type == "string":
        return Finding(message=LITERAL_CONCATENATION_MESSAGE)
    return None
