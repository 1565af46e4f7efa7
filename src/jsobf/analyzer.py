# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analyze JavaScript scopes to index renameable bindings and their uses."""

import logging
from dataclasses import dataclass
from typing import Literal

from tree_sitter import Node

from jsaudit.parser import SourceTree, declaration_kind

logger = logging.getLogger(__name__)

OccurrenceForm = Literal[
    "identifier",
    "shorthand_property",
    "shorthand_pattern",
    "import_specifier",
    "export_specifier",
]
ScopeKind = Literal["function", "block"]


@dataclass(frozen=True)
class Binding:
    """Represent one declared name in one lexical scope.

    Args:
        binding_id: Stable index of the binding in declaration order.
        name: Declared name.
        exported: Whether an ``export`` declaration introduced the binding.
    """

    binding_id: int
    name: str
    exported: bool


@dataclass(frozen=True)
class Occurrence:
    """Represent one source span naming a binding.

    Args:
        binding_id: Binding the span resolves to.
        name: Name as written in the source.
        start_byte: Span start offset.
        end_byte: Span end offset.
        form: Syntactic form of the span, which decides how it is rewritten.
    """

    binding_id: int
    name: str
    start_byte: int
    end_byte: int
    form: OccurrenceForm


@dataclass(frozen=True)
class ScopeIndex:
    """Store bindings, resolved occurrences and unresolved names of a module.

    Args:
        bindings: Bindings ordered by id.
        occurrences: Declaration and reference spans ordered by position.
        global_names: Referenced names with no binding in the module.
    """

    bindings: tuple[Binding, ...]
    occurrences: tuple[Occurrence, ...]
    global_names: frozenset[str]


class _Scope:
    """Hold the names bound directly in one lexical scope."""

    def __init__(self, kind: ScopeKind, parent: "_Scope | None") -> None:
        self.kind = kind
        self.parent = parent
        self.bindings: dict[str, int] = {}

    def function_scope(self) -> "_Scope":
        scope = self
        while scope.kind != "function" and scope.parent is not None:
            scope = scope.parent
        return scope

    def lookup(self, name: str) -> int | None:
        scope: _Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return None


@dataclass(frozen=True)
class _PendingReference:
    name: str
    start_byte: int
    end_byte: int
    form: OccurrenceForm
    scope: _Scope


@dataclass(frozen=True)
class _Task:
    node: Node
    scope: _Scope
    target: _Scope | None = None
    exported: bool = False


class _ScopeCollector:
    """Collect bindings per scope and the references to resolve afterwards."""

    def __init__(self, source: bytes) -> None:
        """Initialize collector state.

        Args:
            source: Source bytes of the analyzed tree.
        """
        self._source = source
        self.root = _Scope(kind="function", parent=None)
        self._names: list[str] = []
        self._exported: set[int] = set()
        self._export_scope: _Scope | None = None
        self._scheduled: list[_Task] = []
        self._occurrences: list[Occurrence] = []
        self._references: list[_PendingReference] = []

    def visit(self, node: Node, scope: _Scope) -> None:
        """Visit a subtree in pre-order within its enclosing scope.

        Work is kept on an explicit stack so deeply nested sources do not
        exhaust the interpreter stack.

        Args:
            node: Subtree root.
            scope: Scope in effect at the node.
        """
        stack = [_Task(node=node, scope=scope)]
        while stack:
            task = stack.pop()
            self._scheduled = []
            self._export_scope = task.scope if task.exported else None
            self._dispatch(task)
            stack.extend(reversed(self._scheduled))

    def build_index(self) -> ScopeIndex:
        """Resolve pending references and freeze the collected index.

        Returns:
            Scope index for rename planning.
        """
        occurrences = list(self._occurrences)
        global_names: set[str] = set()
        for reference in self._references:
            binding_id = reference.scope.lookup(reference.name)
            if binding_id is None:
                global_names.add(reference.name)
                continue
            occurrences.append(
                Occurrence(
                    binding_id=binding_id,
                    name=reference.name,
                    start_byte=reference.start_byte,
                    end_byte=reference.end_byte,
                    form=reference.form,
                )
            )
        occurrences.sort(key=lambda occurrence: occurrence.start_byte)
        bindings = tuple(
            Binding(binding_id=index, name=name, exported=index in self._exported)
            for index, name in enumerate(self._names)
        )
        return ScopeIndex(
            bindings=bindings,
            occurrences=tuple(occurrences),
            global_names=frozenset(global_names),
        )

    def _dispatch(self, task: _Task) -> None:
        node = task.node
        scope = task.scope
        match node.type:
            case "variable_declarator" if task.target is not None:
                name = node.child_by_field_name("name")
                if name is not None:
                    self._declare_pattern(name, task.target, scope)
                value = node.child_by_field_name("value")
                if value is not None:
                    self._schedule(value, scope)
            case "variable_declaration":
                self._schedule_declarators(
                    node,
                    target=scope.function_scope(),
                    scope=scope,
                    exported=task.exported,
                )
            case "lexical_declaration":
                self._schedule_declarators(
                    node, target=scope, scope=scope, exported=task.exported
                )
            case "function_declaration" | "generator_function_declaration":
                name = node.child_by_field_name("name")
                if name is not None:
                    self._declare(name, scope, "identifier")
                self._visit_function(node, scope)
            case "function_expression" | "function" | "generator_function":
                name = node.child_by_field_name("name")
                if name is not None:
                    scope = _Scope(kind="block", parent=scope)
                    self._declare(name, scope, "identifier")
                self._visit_function(node, scope)
            case "arrow_function" | "method_definition":
                self._visit_function(node, scope)
            case "class_declaration":
                name = node.child_by_field_name("name")
                if name is not None:
                    self._declare(name, scope, "identifier")
                self._visit_fields_except(node, scope, skipped="name")
            case "class":
                name = node.child_by_field_name("name")
                if name is not None:
                    scope = _Scope(kind="block", parent=scope)
                    self._declare(name, scope, "identifier")
                self._visit_fields_except(node, scope, skipped="name")
            case "class_static_block":
                self._visit_children(node, _Scope(kind="function", parent=scope))
            case "statement_block" | "switch_body" | "for_statement":
                self._visit_children(node, _Scope(kind="block", parent=scope))
            case "for_in_statement":
                self._visit_for_in(node, scope)
            case "catch_clause":
                self._visit_catch(node, scope)
            case "import_statement":
                self._visit_import(node)
            case "export_statement":
                self._visit_export(node, scope)
            case "identifier":
                self._reference(node, scope, "identifier")
            case "shorthand_property_identifier":
                self._reference(node, scope, "shorthand_property")
            case "shorthand_property_identifier_pattern":
                self._reference(node, scope, "shorthand_pattern")
            case _:
                self._visit_children(node, scope)

    def _schedule(
        self,
        node: Node,
        scope: _Scope,
        target: _Scope | None = None,
        exported: bool = False,
    ) -> None:
        self._scheduled.append(
            _Task(node=node, scope=scope, target=target, exported=exported)
        )

    def _visit_children(self, node: Node, scope: _Scope) -> None:
        for child in node.children:
            self._schedule(child, scope)

    def _visit_fields_except(self, node: Node, scope: _Scope, skipped: str) -> None:
        for index, child in enumerate(node.children):
            if node.field_name_for_child(index) == skipped:
                continue
            self._schedule(child, scope)

    def _schedule_declarators(
        self, node: Node, target: _Scope, scope: _Scope, exported: bool
    ) -> None:
        """Queue declarators binding into ``target``.

        Args:
            node: Variable or lexical declaration.
            target: Scope receiving the declared names.
            scope: Scope in effect for initializer expressions.
            exported: Whether the declaration is part of an ``export``.
        """
        for child in node.children:
            if child.type == "variable_declarator":
                self._schedule(child, scope, target=target, exported=exported)
            else:
                self._schedule(child, scope)

    def _visit_function(self, node: Node, scope: _Scope) -> None:
        """Open a function scope holding parameters and body declarations.

        Args:
            node: Function-like node.
            scope: Enclosing scope.
        """
        function_scope = _Scope(kind="function", parent=scope)
        for index, child in enumerate(node.children):
            field_name = node.field_name_for_child(index)
            if field_name == "name":
                if child.type == "computed_property_name":
                    self._schedule(child, scope)
            elif field_name == "parameters":
                for parameter in child.named_children:
                    self._declare_pattern(parameter, function_scope, function_scope)
            elif field_name == "parameter":
                self._declare_pattern(child, function_scope, function_scope)
            elif field_name == "body" and child.type == "statement_block":
                self._visit_children(child, function_scope)
            elif field_name == "body":
                self._schedule(child, function_scope)
            else:
                self._schedule(child, scope)

    def _visit_for_in(self, node: Node, scope: _Scope) -> None:
        loop_scope = _Scope(kind="block", parent=scope)
        kind = declaration_kind(node)
        for index, child in enumerate(node.children):
            if kind is not None and node.field_name_for_child(index) == "left":
                target = loop_scope.function_scope() if kind == "var" else loop_scope
                self._declare_pattern(child, target, loop_scope)
                continue
            self._schedule(child, loop_scope)

    def _visit_catch(self, node: Node, scope: _Scope) -> None:
        catch_scope = _Scope(kind="block", parent=scope)
        for index, child in enumerate(node.children):
            if node.field_name_for_child(index) == "parameter":
                self._declare_pattern(child, catch_scope, catch_scope)
                continue
            self._schedule(child, catch_scope)

    def _visit_import(self, node: Node) -> None:
        """Bind imported names in the module scope.

        Args:
            node: Import statement.
        """
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                match part.type:
                    case "identifier":
                        self._declare(part, self.root, "identifier")
                    case "namespace_import":
                        for name in part.named_children:
                            if name.type == "identifier":
                                self._declare(name, self.root, "identifier")
                    case "named_imports":
                        for specifier in part.named_children:
                            if specifier.type == "import_specifier":
                                self._declare_import_specifier(specifier)

    def _declare_import_specifier(self, specifier: Node) -> None:
        alias = specifier.child_by_field_name("alias")
        if alias is not None:
            self._declare(alias, self.root, "identifier")
            return
        name = specifier.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._declare(name, self.root, "import_specifier")

    def _visit_export(self, node: Node, scope: _Scope) -> None:
        """Visit an export, marking names its declaration introduces.

        Args:
            node: Export statement.
            scope: Enclosing scope.
        """
        if node.child_by_field_name("source") is not None:
            return
        for index, child in enumerate(node.children):
            if node.field_name_for_child(index) == "declaration":
                self._schedule(child, scope, exported=True)
            elif child.type == "export_clause":
                for specifier in child.named_children:
                    if specifier.type == "export_specifier":
                        self._reference_export_specifier(specifier, scope)
            else:
                self._schedule(child, scope)

    def _reference_export_specifier(self, specifier: Node, scope: _Scope) -> None:
        name = specifier.child_by_field_name("name")
        if name is None or name.type != "identifier":
            return
        if specifier.child_by_field_name("alias") is not None:
            self._reference(name, scope, "identifier")
        else:
            self._reference(name, scope, "export_specifier")

    def _declare_pattern(self, node: Node, target: _Scope, scope: _Scope) -> None:
        """Bind every name a binding pattern introduces.

        Default values and computed keys are queued for visiting in ``scope``.

        Args:
            node: Identifier or destructuring pattern.
            target: Scope receiving the names.
            scope: Scope in effect for default values and computed keys.
        """
        pending = [node]
        while pending:
            current = pending.pop()
            match current.type:
                case "identifier":
                    self._declare(current, target, "identifier")
                case "shorthand_property_identifier_pattern":
                    self._declare(current, target, "shorthand_pattern")
                case "object_pattern" | "array_pattern" | "rest_pattern":
                    pending.extend(reversed(current.named_children))
                case "pair_pattern":
                    key = current.child_by_field_name("key")
                    if key is not None and key.type == "computed_property_name":
                        self._schedule(key, scope)
                    value = current.child_by_field_name("value")
                    if value is not None:
                        pending.append(value)
                case "assignment_pattern" | "object_assignment_pattern":
                    right = current.child_by_field_name("right")
                    if right is not None:
                        self._schedule(right, scope)
                    left = current.child_by_field_name("left")
                    if left is not None:
                        pending.append(left)
                case _:
                    self._schedule(current, scope)

    def _declare(self, node: Node, target: _Scope, form: OccurrenceForm) -> None:
        name = self._text(node)
        binding_id = target.bindings.get(name)
        if binding_id is None:
            binding_id = len(self._names)
            self._names.append(name)
            target.bindings[name] = binding_id
        if target is self._export_scope:
            self._exported.add(binding_id)
        self._occurrences.append(
            Occurrence(
                binding_id=binding_id,
                name=name,
                start_byte=node.start_byte,
                end_byte=node.end_byte,
                form=form,
            )
        )

    def _reference(self, node: Node, scope: _Scope, form: OccurrenceForm) -> None:
        self._references.append(
            _PendingReference(
                name=self._text(node),
                start_byte=node.start_byte,
                end_byte=node.end_byte,
                form=form,
                scope=scope,
            )
        )

    def _text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")


def analyze_scopes(tree: SourceTree) -> ScopeIndex:
    """Index bindings and resolved occurrences of one parsed module.

    Args:
        tree: Parsed source tree.

    Returns:
        Scope index for rename planning.
    """
    collector = _ScopeCollector(source=tree.source)
    collector.visit(tree.root, collector.root)
    index = collector.build_index()
    logger.info(
        "Scope analysis finished (bindings=%s occurrences=%s globals=%s)",
        len(index.bindings),
        len(index.occurrences),
        len(index.global_names),
    )
    return index
