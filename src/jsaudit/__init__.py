# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for JavaScript analysis components."""

from jsaudit.findings import DiagnosticAccumulator, Finding
from jsaudit.linter import EslintOracle, LintError, LintOracle, parse_lint_output
from jsaudit.parser import ParseError, SourceTree, parse_source
from jsaudit.resolution import FlatResolutionTracker, ResolutionTracker
from jsaudit.walker import AnalysisResult, TreeWalker, analyze_tree

__all__ = [
    "AnalysisResult",
    "DiagnosticAccumulator",
    "EslintOracle",
    "Finding",
    "FlatResolutionTracker",
    "LintError",
    "LintOracle",
    "ParseError",
    "ResolutionTracker",
    "SourceTree",
    "TreeWalker",
    "analyze_tree",
    "parse_lint_output",
    "parse_source",
]
