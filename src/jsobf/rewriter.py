# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rewrite JavaScript source using binding rename maps."""

import logging
from dataclasses import dataclass

from jsaudit.parser import ParseError, SourceTree, parse_source
from jsobf.analyzer import Occurrence, ScopeIndex, analyze_scopes
from jsobf.mapper import RenameMap, build_rename_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteResult:
    """Store transformed source and rewrite counters.

    Args:
        transformed_source: Rewritten JavaScript source code.
        symbols_renamed: Count of spans whose name was replaced.
        sites_normalized: Count of shorthand or specifier spans expanded.
    """

    transformed_source: str
    symbols_renamed: int
    sites_normalized: int


class RewriteError(RuntimeError):
    """Represent rewrite-phase failure."""


@dataclass(frozen=True)
class _Edit:
    start_byte: int
    end_byte: int
    replacement: str


def rewrite_source(
    tree: SourceTree, index: ScopeIndex, rename_map: RenameMap
) -> RewriteResult:
    """Apply a rename map to a parsed module.

    Args:
        tree: Parsed source tree the index was built from.
        index: Module scope index.
        rename_map: Binding rename map.

    Returns:
        Rewritten source and counters.

    Raises:
        RewriteError: If the rewritten source no longer parses.
    """
    edits: list[_Edit] = []
    normalized = 0
    for occurrence in index.occurrences:
        new_name = rename_map.mapping.get(occurrence.binding_id)
        if new_name is None or new_name == occurrence.name:
            continue
        replacement = _normalized_replacement(occurrence, new_name)
        if replacement != new_name:
            normalized += 1
        edits.append(
            _Edit(
                start_byte=occurrence.start_byte,
                end_byte=occurrence.end_byte,
                replacement=replacement,
            )
        )

    transformed = _terminate(_apply_edits(tree.source, edits).decode("utf-8"))
    try:
        parse_source(transformed)
    except ParseError as exc:
        logger.warning("Rewritten source failed to parse (error=%s)", exc)
        raise RewriteError(str(exc)) from exc

    return RewriteResult(
        transformed_source=transformed,
        symbols_renamed=len(edits),
        sites_normalized=normalized,
    )


def obfuscate_tree(tree: SourceTree) -> RewriteResult:
    """Rename every local binding of a parsed module.

    Args:
        tree: Parsed source tree.

    Returns:
        Rewritten source and counters.

    Raises:
        RewriteError: If the rewritten source no longer parses.
    """
    index = analyze_scopes(tree)
    rename_map = build_rename_map(index=index)
    result = rewrite_source(tree=tree, index=index, rename_map=rename_map)
    logger.info(
        "Rewrite finished (bindings=%s renamed=%s normalized=%s)",
        len(rename_map.mapping),
        result.symbols_renamed,
        result.sites_normalized,
    )
    return result


def _normalized_replacement(occurrence: Occurrence, new_name: str) -> str:
    """Render a replacement that keeps the span's external name intact.

    Args:
        occurrence: Span being renamed.
        new_name: Generated binding name.

    Returns:
        Replacement text for the span.
    """
    match occurrence.form:
        case "shorthand_property" | "shorthand_pattern":
            return f"{occurrence.name}: {new_name}"
        case "import_specifier":
            return f"{occurrence.name} as {new_name}"
        case "export_specifier":
            return f"{new_name} as {occurrence.name}"
        case _:
            return new_name


def _apply_edits(source: bytes, edits: list[_Edit]) -> bytes:
    chunks: list[bytes] = []
    cursor = 0
    for edit in sorted(edits, key=lambda item: item.start_byte):
        chunks.append(source[cursor : edit.start_byte])
        chunks.append(edit.replacement.encode("utf-8"))
        cursor = edit.end_byte
    chunks.append(source[cursor:])
    return b"".join(chunks)


def _terminate(text: str) -> str:
    if text.endswith("\n"):
        return text
    return f"{text}\n"
