"""
PHP structural parser.

The walk visits every named node of the tree. Node types the parser cares
about are mapped onto ``PhpNodeKind``; each kind has one handler that emits
records and returns the enclosing class name to hand down to the node's
children. Everything else is ``PhpNodeKind.OTHER`` and is only descended
into, so methods and properties are attributed to their class however deep
they sit.
"""

from enum import Enum
from typing import Callable

from tree_sitter import Node, Tree

from .constants import (
    ANONYMOUS_CLASS_NAME,
    ANONYMOUS_INTERFACE_NAME,
    ANONYMOUS_NAME,
    UNNAMED_PARAM,
)
from .structural_parser import Extraction, StructuralParser
from .types import EntityKind, ImportInfo, Visibility
from .utils.tree_utils import field_text, first_child_of_type, node_text


class PhpNodeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    METHOD = "method"
    FUNCTION = "function"
    PROPERTY = "property"
    USE_IMPORT = "use-import"
    OTHER = "other"


PHP_NODE_KINDS: dict[str, PhpNodeKind] = {
    "class_declaration": PhpNodeKind.CLASS,
    "anonymous_class": PhpNodeKind.CLASS,
    "interface_declaration": PhpNodeKind.INTERFACE,
    "method_declaration": PhpNodeKind.METHOD,
    "function_definition": PhpNodeKind.FUNCTION,
    "property_declaration": PhpNodeKind.PROPERTY,
    "namespace_use_declaration": PhpNodeKind.USE_IMPORT,
}

# Class-like scopes that are not reported but still own their methods
SCOPE_NODE_TYPES = {"trait_declaration", "enum_declaration"}

PARAMETER_TYPES = {
    "simple_parameter",
    "variadic_parameter",
    "property_promotion_parameter",
}

# namespace_use_group_clause/namespace_aliasing_clause come from older grammars
USE_CLAUSE_TYPES = {"namespace_use_clause", "namespace_use_group_clause"}
USE_NAME_TYPES = ("qualified_name", "namespace_name", "name")


def classify(node: Node) -> PhpNodeKind:
    kind = PHP_NODE_KINDS.get(node.type, PhpNodeKind.OTHER)
    # Older grammars inline `new class {}` into object_creation_expression
    if (
        kind is PhpNodeKind.OTHER
        and node.type == "object_creation_expression"
        and first_child_of_type(node, "declaration_list") is not None
    ):
        return PhpNodeKind.CLASS
    return kind


def children(node: Node) -> list[Node]:
    """Child positions the walk descends into, for every kind."""
    return node.named_children


def _variable_name(node: Node | None) -> str | None:
    """`$name` -> `name`."""
    if node is None:
        return None
    if node.type == "variable_name":
        name = first_child_of_type(node, "name")
        if name is not None:
            return node_text(name)
    text = node_text(node)
    return text.lstrip("$") if text else None


def _params(node: Node) -> list[str]:
    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [
        _variable_name(p.child_by_field_name("name")) or UNNAMED_PARAM
        for p in params.named_children
        if p.type in PARAMETER_TYPES
    ]


def _return_type(node: Node) -> str | None:
    annotation = field_text(node, "return_type")
    if annotation is None:
        return None
    return annotation.lstrip(":").strip() or None


def _visibility(node: Node) -> Visibility:
    modifier = first_child_of_type(node, "visibility_modifier")
    if modifier is None:
        return Visibility.PUBLIC
    # PHP 8.4 asymmetric visibility reads `private(set)`
    keyword = (node_text(modifier) or "public").split("(")[0].strip().lower()
    try:
        return Visibility(keyword)
    except ValueError:
        return Visibility.PUBLIC


def _use_clause_alias(clause: Node) -> str | None:
    alias = clause.child_by_field_name("alias")
    if alias is None:
        aliasing = first_child_of_type(clause, "namespace_aliasing_clause")
        alias = first_child_of_type(aliasing, "name") if aliasing is not None else None
    return node_text(alias)


class _PhpWalker:
    def __init__(self, extraction: Extraction):
        self.extraction = extraction
        self.handlers: dict[PhpNodeKind, Callable[[Node, str | None], str | None]] = {
            PhpNodeKind.CLASS: self.visit_class,
            PhpNodeKind.INTERFACE: self.visit_interface,
            PhpNodeKind.METHOD: self.visit_method,
            PhpNodeKind.FUNCTION: self.visit_function,
            PhpNodeKind.PROPERTY: self.visit_property,
            PhpNodeKind.USE_IMPORT: self.visit_use,
        }

    def walk(self, root: Node) -> None:
        stack: list[tuple[Node, str | None]] = [(root, None)]
        while stack:
            node, enclosing_class = stack.pop()

            kind = classify(node)
            if kind is not PhpNodeKind.OTHER:
                enclosing_class = self.handlers[kind](node, enclosing_class)
            elif node.type in SCOPE_NODE_TYPES:
                enclosing_class = field_text(node, "name") or enclosing_class

            stack.extend((child, enclosing_class) for child in reversed(children(node)))

    def visit_class(self, node: Node, enclosing_class: str | None) -> str:
        name = field_text(node, "name") or ANONYMOUS_CLASS_NAME
        self.extraction.add_entity(node, name, EntityKind.CLASS)
        return name

    def visit_interface(self, node: Node, enclosing_class: str | None) -> str:
        name = field_text(node, "name") or ANONYMOUS_INTERFACE_NAME
        self.extraction.add_entity(node, name, EntityKind.INTERFACE)
        return name

    def visit_method(self, node: Node, enclosing_class: str | None) -> str | None:
        self.extraction.add_entity(
            node,
            field_text(node, "name") or ANONYMOUS_NAME,
            EntityKind.METHOD,
            params=_params(node),
            return_type=_return_type(node),
            parent_class=enclosing_class,
            visibility=_visibility(node),
        )
        return enclosing_class

    def visit_function(self, node: Node, enclosing_class: str | None) -> str | None:
        self.extraction.add_entity(
            node,
            field_text(node, "name") or ANONYMOUS_NAME,
            EntityKind.FUNCTION,
            params=_params(node),
            return_type=_return_type(node),
        )
        return enclosing_class

    def visit_property(self, node: Node, enclosing_class: str | None) -> str | None:
        visibility = _visibility(node)
        for element in node.named_children:
            if element.type != "property_element":
                continue
            variable = element.child_by_field_name("name") or first_child_of_type(
                element, "variable_name"
            )
            self.extraction.add_entity(
                element,
                _variable_name(variable) or ANONYMOUS_NAME,
                EntityKind.PROPERTY,
                parent_class=enclosing_class,
                visibility=visibility,
            )
        return enclosing_class

    def visit_use(self, node: Node, enclosing_class: str | None) -> str | None:
        group = first_child_of_type(node, "namespace_use_group")
        if group is not None:
            prefix = node_text(first_child_of_type(node, "namespace_name"))
            clauses = [c for c in group.named_children if c.type in USE_CLAUSE_TYPES]
        else:
            prefix = None
            clauses = [c for c in node.named_children if c.type in USE_CLAUSE_TYPES]

        for clause in clauses:
            name = node_text(first_child_of_type(clause, *USE_NAME_TYPES))
            if not name:
                continue
            source = f"{prefix}\\{name}" if prefix else name
            local = _use_clause_alias(clause) or name.split("\\")[-1] or name
            self.extraction.imports.append(
                ImportInfo(
                    source=source,
                    imported_names=[local],
                    line=clause.start_point[0] + 1,
                )
            )
        return enclosing_class


class PHPParser(StructuralParser):
    """Structural parser for .php files. PHP has no exports."""

    def grammar_for(self, path: str) -> str:
        return "php"

    def language_for(self, path: str) -> str:
        return "php"

    def extract(self, tree: Tree, extraction: Extraction) -> None:
        _PhpWalker(extraction).walk(tree.root_node)
