# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""External linter boundary and its ESLint subprocess implementation."""

import json
import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from jsaudit.findings import Finding

logger = logging.getLogger(__name__)

DEFAULT_LINT_TIMEOUT_SECONDS = 60.0
VALIDATOR_SCRIPT = Path(__file__).with_name("validator.js")


class LintError(RuntimeError):
    """Represent a linter launch or timeout failure."""


class LintOracle(Protocol):
    """Produce external diagnostics for a source file."""

    def analyze(self, path: Path) -> list[Finding]:
        """Lint one file.

        Args:
            path: Source file path.

        Returns:
            Linter findings with line and column.

        Raises:
            LintError: If the linter cannot be run to completion.
        """


def default_lint_command() -> list[str]:
    """Return the command running the bundled ESLint driver."""
    return ["node", str(VALIDATOR_SCRIPT)]


class EslintOracle:
    """Run an ESLint driver process and parse its JSON report."""

    def __init__(
        self,
        command: Sequence[str] | None = None,
        timeout: float | None = DEFAULT_LINT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize oracle configuration.

        Args:
            command: Program and leading arguments; the file path is appended.
            timeout: Seconds to wait for the process; ``None`` waits forever.
        """
        self._command = list(command) if command else default_lint_command()
        self._timeout = timeout

    def analyze(self, path: Path) -> list[Finding]:
        """Run the linter on one file.

        Args:
            path: Source file path.

        Returns:
            Parsed linter findings.

        Raises:
            LintError: If the process cannot start or exceeds the timeout.
        """
        argv = [*self._command, str(path)]
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning(
                "Linter timed out (command=%s timeout=%s)", argv, self._timeout
            )
            raise LintError(
                f"El validador no respondió en {self._timeout} segundos"
            ) from exc
        except OSError as exc:
            logger.warning("Linter launch failed (command=%s error=%s)", argv, exc)
            raise LintError(f"No se pudo ejecutar el validador: {exc}") from exc

        if completed.returncode != 0:
            logger.info(
                "Linter exited with non-zero status (returncode=%s stderr=%s)",
                completed.returncode,
                completed.stderr.decode("utf-8", "replace").strip(),
            )
        return parse_lint_output(completed.stdout)


def parse_lint_output(payload: bytes) -> list[Finding]:
    """Parse the linter JSON report.

    Empty or malformed payloads yield no findings.

    Args:
        payload: Raw standard output of the linter.

    Returns:
        Findings in report order.
    """
    if not payload.strip():
        return []
    try:
        data = json.loads(payload)
    except (UnicodeDecodeError, ValueError) as exc:
        logger.warning("Ignoring malformed linter output (error=%s)", exc)
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring linter output that is not a list")
        return []

    findings: list[Finding] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        message = entry.get("message")
        findings.append(
            Finding(
                message=message if isinstance(message, str) else "",
                line=_as_int(entry.get("line")),
                column=_as_int(entry.get("column")),
            )
        )
    return findings


def _as_int(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0
