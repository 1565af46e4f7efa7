# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Build deterministic binding rename maps."""

import logging
from dataclasses import dataclass

from jsobf.analyzer import ScopeIndex

logger = logging.getLogger(__name__)

RESERVED_NAMES: frozenset[str] = frozenset(
    {
        "arguments",
        "as",
        "async",
        "await",
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "eval",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "from",
        "function",
        "get",
        "if",
        "implements",
        "import",
        "in",
        "instanceof",
        "interface",
        "let",
        "new",
        "null",
        "of",
        "package",
        "private",
        "protected",
        "public",
        "return",
        "set",
        "static",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "undefined",
        "var",
        "void",
        "while",
        "with",
        "yield",
        "NaN",
        "Infinity",
    }
)


@dataclass(frozen=True)
class RenameMap:
    """Store generated binding names and the names left untouched.

    Args:
        mapping: Binding id to generated name.
        kept_names: Names of bindings that keep their original name.
    """

    mapping: dict[int, str]
    kept_names: frozenset[str]


def build_rename_map(index: ScopeIndex) -> RenameMap:
    """Build a deterministic rename map from a scope index.

    Every renamed binding receives its own name, so distinct bindings never
    share a generated name.

    Args:
        index: Module scope index.

    Returns:
        Deterministic rename map.
    """
    kept_names = {binding.name for binding in index.bindings if binding.exported}
    blocked_names = set(RESERVED_NAMES)
    blocked_names.update(index.global_names)
    blocked_names.update(kept_names)

    if "eval" in index.global_names:
        logger.warning(
            "Module calls eval; evaluated code may reference renamed bindings"
        )

    mapping: dict[int, str] = {}
    counter = 0
    for binding in index.bindings:
        if binding.exported:
            continue
        obfuscated, counter = _next_symbol_name(blocked_names, counter)
        mapping[binding.binding_id] = obfuscated

    if kept_names:
        logger.info("Kept exported names (count=%s)", len(kept_names))

    return RenameMap(mapping=mapping, kept_names=frozenset(kept_names))


def _next_symbol_name(blocked_names: set[str], counter: int) -> tuple[str, int]:
    """Generate the next deterministic obfuscated symbol.

    Args:
        blocked_names: Names that cannot be used.
        counter: Counter to start from.

    Returns:
        Next available name and the counter to continue from.
    """
    while True:
        candidate = _alphabetic_name(counter)
        counter += 1
        if candidate in blocked_names:
            continue
        return candidate, counter


def _alphabetic_name(counter: int) -> str:
    """Generate deterministic alphabetic identifier from integer counter.

    Args:
        counter: Zero-based integer index.

    Returns:
        Alphabetic identifier in base-26 lowercase.
    """
    alphabet = "abcdefghijklmnopqrstuvwxyz"
    index = counter
    chars: list[str] = []
    while True:
        chars.append(alphabet[index % 26])
        index = index // 26 - 1
        if index < 0:
            break
    return "".join(reversed(chars))
