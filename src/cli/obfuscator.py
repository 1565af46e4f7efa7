# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analyze one JavaScript file, report findings and write a renamed copy."""

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import NoReturn, TextIO

from jsaudit import EslintOracle, LintOracle, ParseError, analyze_tree, parse_source
from jsaudit.linter import DEFAULT_LINT_TIMEOUT_SECONDS
from jsaudit.report import linter_lines, pattern_lines, unresolved_lines
from jsobf import obfuscate_tree
from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "obfuscated.js"


class UsageError(Exception):
    """Represent invalid command line arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure application logging with Rich handler on standard error.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
            )
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = _ArgumentParser(
        prog="jsaudit",
        description="Report suspicious patterns in a JavaScript file and rename its bindings.",
    )
    parser.add_argument("path", help="JavaScript file to analyze.")
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Destination of the renamed source (default: {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "--lint-command",
        default=None,
        help="Linter command line; the file path is appended. Defaults to the bundled ESLint driver.",
    )
    parser.add_argument(
        "--lint-timeout",
        type=float,
        default=DEFAULT_LINT_TIMEOUT_SECONDS,
        help="Seconds to wait for the linter; 0 waits indefinitely.",
    )
    parser.add_argument(
        "--no-lint", action="store_true", help="Skip the external linter."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log pipeline progress."
    )
    return parser


def run(
    argv: list[str],
    stdout: TextIO,
    stderr: TextIO,
    lint_oracle: LintOracle | None = None,
) -> int:
    """Run the analysis and obfuscation pipeline.

    Read, write and linter launch failures are not caught here.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.
        lint_oracle: Linter to consult instead of one built from the arguments.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1
    except UsageError as exc:
        logger.warning("Argument parsing failed (argv=%s error=%s)", argv, exc)
        stderr.write(f"Uso: {parser.prog} <archivo.js>\n")
        return 1
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    console = Console(
        file=stdout,
        force_terminal=False,
        color_system=None,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )
    input_path = Path(args.path)
    source = input_path.read_text(encoding="utf-8")

    try:
        tree = parse_source(source)
    except ParseError as exc:
        stderr.write(f"Error de sintaxis: {exc}\n")
        return 1
    _enter_stage("parsed", path=input_path)

    analysis = analyze_tree(tree)
    _emit(console, pattern_lines(analysis.findings))
    _emit(console, unresolved_lines(analysis.unresolved_names))
    _enter_stage("analyzed", path=input_path)

    if not args.no_lint:
        oracle = lint_oracle or _build_oracle(args.lint_command, args.lint_timeout)
        _emit(console, linter_lines(oracle.analyze(input_path)))
    _enter_stage("linter_merged", path=input_path)

    result = obfuscate_tree(tree)
    _enter_stage("renamed", path=input_path)

    output_path = Path(args.output)
    _write_output(output_path, result.transformed_source)
    _enter_stage("written", path=output_path)
    console.print(f"Código ofuscado guardado en {output_path}", markup=False)
    _enter_stage("done", path=output_path)
    return 0


def _build_oracle(command: str | None, timeout: float) -> EslintOracle:
    return EslintOracle(
        command=shlex.split(command) if command else None,
        timeout=timeout if timeout > 0 else None,
    )


def _emit(console: Console, lines: list[str]) -> None:
    for line in lines:
        console.print(line, markup=False)


def _enter_stage(stage: str, path: Path) -> None:
    logger.info("Pipeline stage reached (stage=%s path=%s)", stage, path)


def _write_output(output_path: Path, text: str) -> None:
    """Replace the destination with the rewritten source.

    The text is written to a sibling temporary file first so the destination
    never holds a partial result.

    Args:
        output_path: Destination file.
        text: Rewritten source.

    Raises:
        OSError: If the file cannot be written.
    """
    tmp_path = output_path.with_name(f"{output_path.name}.tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(output_path)
    except OSError as exc:
        logger.warning("Failed writing file (path=%s error=%s)", output_path, exc)
        tmp_path.unlink(missing_ok=True)
        raise


def main() -> None:
    """Run the jsaudit CLI."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
