# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Identifier resolution tracking for the undefined-variable check."""

from typing import Protocol


class ResolutionTracker(Protocol):
    """Track declarations and references observed during one traversal."""

    def observe_identifier(self, name: str) -> None:
        """Record an identifier reference."""

    def observe_declaration(self, name: str) -> None:
        """Record a variable declaration target."""

    def unresolved_names(self) -> list[str]:
        """Return referenced names never declared, in first-occurrence order."""


class FlatResolutionTracker:
    """Resolve names against one whole-program scope.

    Declarations anywhere in the tree resolve references anywhere in the tree.
    A reference seen before its declaration is recorded but drops out of
    ``unresolved_names`` once the declaration has been observed.
    """

    def __init__(self) -> None:
        self._declared: list[str] = []
        self._declared_set: set[str] = set()
        self._referenced: list[str] = []
        self._referenced_set: set[str] = set()

    def observe_identifier(self, name: str) -> None:
        """Record a reference unless already declared or already recorded.

        Args:
            name: Identifier name.
        """
        if name in self._declared_set or name in self._referenced_set:
            return
        self._referenced.append(name)
        self._referenced_set.add(name)

    def observe_declaration(self, name: str) -> None:
        """Record a declaration target; repeats are kept.

        Args:
            name: Declared identifier name.
        """
        self._declared.append(name)
        self._declared_set.add(name)

    def unresolved_names(self) -> list[str]:
        """Return referenced names still undeclared after traversal.

        Returns:
            Names in first-occurrence order.
        """
        return [name for name in self._referenced if name not in self._declared_set]

    @property
    def declared_names(self) -> list[str]:
        return list(self._declared)

    @property
    def referenced_names(self) -> list[str]:
        return list(self._referenced)
