# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the external linter boundary."""

import sys
from pathlib import Path

import pytest

from jsaudit import EslintOracle, Finding, LintError, parse_lint_output


def _source_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.js"
    path.write_text("let a = 1;\n", encoding="utf-8")
    return path


def _python_command(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_lint_001_empty_output_yields_no_findings() -> None:
    assert parse_lint_output(b"") == []
    assert parse_lint_output(b"  \n") == []


def test_lint_002_malformed_output_yields_no_findings() -> None:
    assert parse_lint_output(b"Oops: eslint is not installed") == []
    assert parse_lint_output(b'{"message": "not a list"}') == []
    assert parse_lint_output(b"\xff\xfe") == []


def test_lint_003_array_entries_become_positioned_findings() -> None:
    payload = (
        b'[{"message": "Missing semicolon.", "line": 1, "column": 10, "ruleId": "semi"},'
        b' {"line": "2"}, "skipped"]'
    )

    findings = parse_lint_output(payload)

    assert findings == [
        Finding(message="Missing semicolon.", line=1, column=10),
        Finding(message="", line=0, column=0),
    ]


def test_lint_004_oracle_parses_process_stdout(tmp_path: Path) -> None:
    oracle = EslintOracle(
        command=_python_command(
            "import json, sys; "
            "print(json.dumps([{'message': sys.argv[1][-8:], 'line': 3, 'column': 4}]))"
        )
    )

    findings = oracle.analyze(_source_file(tmp_path))

    assert findings == [Finding(message="input.js", line=3, column=4)]


def test_lint_005_oracle_tolerates_empty_and_garbage_stdout(tmp_path: Path) -> None:
    source = _source_file(tmp_path)

    assert EslintOracle(command=_python_command("pass")).analyze(source) == []
    assert EslintOracle(command=_python_command("print('<html>')")).analyze(source) == []


def test_lint_006_oracle_launch_failure_raises(tmp_path: Path) -> None:
    oracle = EslintOracle(command=[str(tmp_path / "missing-linter")])

    with pytest.raises(LintError):
        oracle.analyze(_source_file(tmp_path))


def test_lint_007_oracle_timeout_raises(tmp_path: Path) -> None:
    oracle = EslintOracle(
        command=_python_command("import time; time.sleep(10)"), timeout=0.2
    )

    with pytest.raises(LintError):
        oracle.analyze(_source_file(tmp_path))
