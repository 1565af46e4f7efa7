# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for rename-obfuscation components."""

from jsobf.analyzer import Binding, Occurrence, ScopeIndex, analyze_scopes
from jsobf.mapper import RenameMap, build_rename_map
from jsobf.rewriter import RewriteError, RewriteResult, obfuscate_tree, rewrite_source

__all__ = [
    "Binding",
    "Occurrence",
    "RenameMap",
    "RewriteError",
    "RewriteResult",
    "ScopeIndex",
    "analyze_scopes",
    "build_rename_map",
    "obfuscate_tree",
    "rewrite_source",
]
