# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Render analysis results as plain report lines."""

from collections.abc import Iterable

from jsaudit.findings import Finding

ERROR_PREFIX = "Error: "
UNDEFINED_PREFIX = "Advertencia: Variable no definida: "
LINTER_PREFIX = "ESLint: "


def pattern_lines(findings: Iterable[Finding]) -> list[str]:
    return [f"{ERROR_PREFIX}{finding.message}" for finding in findings]


def unresolved_lines(names: Iterable[str]) -> list[str]:
    return [f"{UNDEFINED_PREFIX}{name}" for name in names]


def linter_lines(findings: Iterable[Finding]) -> list[str]:
    """Format linter findings with their position.

    Args:
        findings: Findings from the external linter.

    Returns:
        One line per finding.
    """
    return [
        f"{LINTER_PREFIX}{finding.message} "
        f"(línea {finding.line or 0}, columna {finding.column or 0})"
        for finding in findings
    ]
