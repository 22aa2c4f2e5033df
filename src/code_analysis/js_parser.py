"""
ECMAScript/TypeScript structural parser.

Walks a tree-sitter syntax tree and extracts:
- function declarations and arrow functions
- classes with their methods and fields
- TypeScript interfaces and type aliases
- import declarations
- default and named exports

Arrow functions take the name of the variable they initialise
(``const f = () => {}`` is ``f``); any other arrow function is
``"anonymous"``.
"""

from tree_sitter import Node, Tree

from .constants import (
    ANONYMOUS_CLASS_NAME,
    ANONYMOUS_NAME,
    DEFAULT_EXPORT_NAME,
    UNNAMED_PARAM,
)
from .errors import SourceSyntaxError
from .structural_parser import Extraction, StructuralParser
from .types import (
    EntityKind,
    ExportInfo,
    ImportInfo,
    SourceType,
    Visibility,
)
from .utils.language_helpers import get_grammar_name
from .utils.path_utils import get_file_extension
from .utils.tree_utils import (
    field_text,
    first_child_of_type,
    has_token,
    node_text,
    string_value,
)

FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
# Older grammars name function expressions "function"
FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function"}
CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
CLASS_EXPRESSIONS = {"class"}
TYPE_DECLARATIONS = {
    "interface_declaration": EntityKind.INTERFACE,
    "type_alias_declaration": EntityKind.TYPE,
}
VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
PROPERTY_MEMBERS = {"field_definition", "public_field_definition"}
MEMBER_NAME_TYPES = {"property_identifier", "private_property_identifier", "identifier"}


def _is_export_value(node: Node) -> bool:
    parent = node.parent
    return parent is not None and parent.type == "export_statement"


def _return_type(node: Node) -> str | None:
    annotation = field_text(node, "return_type")
    if annotation is None:
        return None
    return annotation.lstrip(":").strip() or None


def _param_name(param: Node) -> str:
    if param.type == "identifier":
        return node_text(param) or UNNAMED_PARAM

    if param.type in ("required_parameter", "optional_parameter"):
        pattern = param.child_by_field_name("pattern")
        # Parameter properties (constructor(private x)) and defaults have no plain name
        if (
            pattern is not None
            and pattern.type == "identifier"
            and param.child_by_field_name("value") is None
            and first_child_of_type(param, "accessibility_modifier") is None
        ):
            return node_text(pattern) or UNNAMED_PARAM

    return UNNAMED_PARAM


def _params(node: Node) -> list[str]:
    single = node.child_by_field_name("parameter")
    if single is not None:
        return [_param_name(single)]

    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [
        _param_name(p)
        for p in params.named_children
        if p.type not in ("comment", "decorator")
    ]


def _arrow_function_name(node: Node) -> str:
    parent = node.parent
    if parent is None or parent.type != "variable_declarator":
        return ANONYMOUS_NAME

    name_node = parent.child_by_field_name("name")
    value_node = parent.child_by_field_name("value")
    if name_node is None or name_node.type != "identifier" or value_node != node:
        return ANONYMOUS_NAME
    return node_text(name_node) or ANONYMOUS_NAME


def _exported_name(node: Node) -> str | None:
    if node.type == "string":
        return string_value(node)
    return node_text(node)


def _bound_names(pattern: Node | None) -> list[str]:
    """Identifiers bound by a declarator name, destructuring included."""
    if pattern is None:
        return []
    if pattern.type in ("identifier", "shorthand_property_identifier_pattern"):
        name = node_text(pattern)
        return [name] if name else []
    if pattern.type == "pair_pattern":
        return _bound_names(pattern.child_by_field_name("value"))
    if pattern.type in ("assignment_pattern", "object_assignment_pattern"):
        return _bound_names(pattern.child_by_field_name("left"))
    if pattern.type in ("object_pattern", "array_pattern", "rest_pattern"):
        return [
            name for child in pattern.named_children for name in _bound_names(child)
        ]
    return []


def _member_name(member: Node) -> tuple[str, Node | None]:
    key = member.child_by_field_name("name") or member.child_by_field_name("property")
    if key is None or key.type not in MEMBER_NAME_TYPES:
        return ANONYMOUS_NAME, key
    return node_text(key) or ANONYMOUS_NAME, key


def _member_visibility(member: Node, key: Node | None) -> Visibility:
    modifier = first_child_of_type(member, "accessibility_modifier")
    if modifier is not None:
        return Visibility((node_text(modifier) or "public").strip())
    if key is not None and key.type == "private_property_identifier":
        return Visibility.PRIVATE
    return Visibility.PUBLIC


def _default_export_name(node: Node) -> str:
    target = node.child_by_field_name("declaration") or node.child_by_field_name(
        "value"
    )
    if target is None:
        return DEFAULT_EXPORT_NAME
    if target.type == "identifier":
        return node_text(target) or DEFAULT_EXPORT_NAME
    return field_text(target, "name") or DEFAULT_EXPORT_NAME


class _EcmaScriptWalker:
    """Visits every node once and records what the handlers recognise."""

    def __init__(self, extraction: Extraction):
        self.extraction = extraction
        self.handlers = {
            "arrow_function": self.visit_arrow_function,
            "import_statement": self.visit_import,
            "export_statement": self.visit_export,
        }
        for node_type in FUNCTION_DECLARATIONS | FUNCTION_EXPRESSIONS:
            self.handlers[node_type] = self.visit_function
        for node_type in CLASS_DECLARATIONS | CLASS_EXPRESSIONS:
            self.handlers[node_type] = self.visit_class
        for node_type in TYPE_DECLARATIONS:
            self.handlers[node_type] = self.visit_type_declaration

    def walk(self, root: Node) -> None:
        # Explicit stack: deeply nested expressions must not hit the recursion limit
        stack = [root]
        while stack:
            node = stack.pop()
            handler = self.handlers.get(node.type)
            if handler is not None:
                handler(node)
            stack.extend(reversed(node.named_children))

    def require_module(self, node: Node) -> None:
        if self.extraction.options.source_type != SourceType.SCRIPT:
            return
        line, _, column, _ = self.extraction.source.span(node)
        raise SourceSyntaxError(
            "'import' and 'export' may appear only with 'sourceType: \"module\"' "
            f"({line}:{column})",
            line=line,
            column=column,
        )

    def visit_function(self, node: Node) -> None:
        is_exported = _is_export_value(node)
        # Function expressions only count as declarations when default-exported
        if node.type in FUNCTION_EXPRESSIONS and not is_exported:
            return

        self.extraction.add_entity(
            node,
            field_text(node, "name") or ANONYMOUS_NAME,
            EntityKind.FUNCTION,
            params=_params(node),
            return_type=_return_type(node),
            is_async=has_token(node, "async"),
            is_exported=is_exported,
        )

    def visit_arrow_function(self, node: Node) -> None:
        self.extraction.add_entity(
            node,
            _arrow_function_name(node),
            EntityKind.FUNCTION,
            params=_params(node),
            return_type=_return_type(node),
            is_async=has_token(node, "async"),
        )

    def visit_class(self, node: Node) -> None:
        is_exported = _is_export_value(node)
        if node.type in CLASS_EXPRESSIONS and not is_exported:
            return

        class_name = field_text(node, "name") or ANONYMOUS_CLASS_NAME
        self.extraction.add_entity(
            node, class_name, EntityKind.CLASS, is_exported=is_exported
        )

        body = node.child_by_field_name("body")
        if body is None:
            return

        for member in body.named_children:
            if member.type == "method_definition":
                name, key = _member_name(member)
                self.extraction.add_entity(
                    member,
                    name,
                    EntityKind.METHOD,
                    params=_params(member),
                    return_type=_return_type(member),
                    is_async=has_token(member, "async"),
                    parent_class=class_name,
                    visibility=_member_visibility(member, key),
                )
            elif member.type in PROPERTY_MEMBERS:
                name, key = _member_name(member)
                self.extraction.add_entity(
                    member,
                    name,
                    EntityKind.PROPERTY,
                    parent_class=class_name,
                    visibility=_member_visibility(member, key),
                )

    def visit_type_declaration(self, node: Node) -> None:
        self.extraction.add_entity(
            node,
            field_text(node, "name") or ANONYMOUS_NAME,
            TYPE_DECLARATIONS[node.type],
            is_exported=_is_export_value(node),
        )

    def visit_import(self, node: Node) -> None:
        self.require_module(node)

        source_node = node.child_by_field_name("source")
        if source_node is None:
            # TypeScript `import x = require("y")`
            return

        names: list[str] = []
        is_default = False
        is_namespace = False

        clause = first_child_of_type(node, "import_clause")
        for child in clause.named_children if clause is not None else []:
            if child.type == "identifier":
                names.append(node_text(child) or "")
                is_default = True
            elif child.type == "namespace_import":
                local = first_child_of_type(child, "identifier")
                names.append(node_text(local) or "")
                is_namespace = True
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    imported = spec.child_by_field_name("name")
                    if imported is None:
                        continue
                    names.append(
                        string_value(imported)
                        if imported.type == "string"
                        else node_text(imported) or ""
                    )

        self.extraction.imports.append(
            ImportInfo(
                source=string_value(source_node),
                imported_names=names,
                is_default=is_default,
                is_namespace=is_namespace,
                line=node.start_point[0] + 1,
            )
        )

    def visit_export(self, node: Node) -> None:
        self.require_module(node)
        line = node.start_point[0] + 1
        exports = self.extraction.exports

        if has_token(node, "default"):
            exports.append(
                ExportInfo(name=_default_export_name(node), is_default=True, line=line)
            )
            return

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type in VARIABLE_DECLARATIONS:
                for declarator in declaration.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    name_node = declarator.child_by_field_name("name")
                    for name in _bound_names(name_node):
                        exports.append(ExportInfo(name=name, line=line))
            else:
                name = field_text(declaration, "name")
                if name:
                    exports.append(ExportInfo(name=name, line=line))

        namespace = first_child_of_type(node, "namespace_export")
        if namespace is not None and namespace.named_children:
            name = _exported_name(namespace.named_children[0])
            if name:
                exports.append(ExportInfo(name=name, line=line))

        clause = first_child_of_type(node, "export_clause")
        for spec in clause.named_children if clause is not None else []:
            if spec.type != "export_specifier":
                continue
            exported = spec.child_by_field_name("alias") or spec.child_by_field_name(
                "name"
            )
            if exported is None:
                continue
            name = _exported_name(exported)
            if name:
                exports.append(ExportInfo(name=name, line=line))


class JavaScriptParser(StructuralParser):
    """Structural parser for .js/.jsx/.mjs/.cjs and .ts/.tsx/.mts/.cts files."""

    def grammar_for(self, path: str) -> str:
        return get_grammar_name(get_file_extension(path)) or "tsx"

    def extract(self, tree: Tree, extraction: Extraction) -> None:
        _EcmaScriptWalker(extraction).walk(tree.root_node)
