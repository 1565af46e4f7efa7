# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Finding records and their ordered accumulator."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Finding:
    """Represent one reported issue.

    Attributes:
        message: Human-readable description.
        line: 1-based line for linter findings; ``None`` for pattern findings.
        column: Column for linter findings; ``None`` for pattern findings.
    """

    message: str
    line: int | None = None
    column: int | None = None


class DiagnosticAccumulator:
    """Collect findings in discovery order without deduplication."""

    def __init__(self) -> None:
        self._findings: list[Finding] = []

    def add(self, finding: Finding) -> None:
        """Append one finding.

        Args:
            finding: Finding to record.
        """
        self._findings.append(finding)

    def drain(self) -> list[Finding]:
        """Return all recorded findings and reset the accumulator.

        Returns:
            Findings in discovery order.
        """
        drained = self._findings
        self._findings = []
        return drained
