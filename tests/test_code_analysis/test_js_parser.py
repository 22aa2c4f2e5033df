"""
Test JavaScript/TypeScript structural extraction.
"""

import re
from pathlib import Path

import pytest

from code_analysis.types import (
    EntityKind,
    ParserOptions,
    SourceType,
    Visibility,
)

SAMPLE_TS = Path(__file__).parent / "test_files" / "sample.ts"


@pytest.fixture
def sample_result(code_parser):
    return code_parser.parse(str(SAMPLE_TS), SAMPLE_TS.read_text())


def _by_name(result, name, kind=None):
    matches = [
        e for e in result.entities if e.name == name and (kind is None or e.kind == kind)
    ]
    assert len(matches) == 1, f"expected one {name!r}, got {matches}"
    return matches[0]


class TestFunctions:
    """Test function and arrow function extraction."""

    def test_simple_function(self, code_parser):
        result = code_parser.parse("a.js", "function foo(a, b) {}")

        assert not result.has_errors
        assert len(result.entities) == 1
        entity = result.entities[0]
        assert entity.kind == EntityKind.FUNCTION
        assert entity.name == "foo"
        assert entity.params == ["a", "b"]
        assert entity.is_async is False
        assert entity.is_exported is False

    def test_async_function(self, code_parser):
        result = code_parser.parse("a.js", "async function load() { await x; }")
        assert result.entities[0].is_async is True

    def test_exported_function(self, sample_result):
        entity = _by_name(sample_result, "formatUser")

        assert entity.is_exported is True
        assert entity.params == ["user", "prefix"]
        assert entity.return_type == "string"

    def test_generator_declaration(self, sample_result):
        assert _by_name(sample_result, "idGenerator").kind == EntityKind.FUNCTION

    def test_arrow_function_named_after_declarator(self, sample_result):
        entity = _by_name(sample_result, "loadUser")

        assert entity.kind == EntityKind.FUNCTION
        assert entity.is_async is True
        assert entity.params == ["id"]
        assert entity.is_exported is None

    def test_untyped_arrow_parameters(self, sample_result):
        assert _by_name(sample_result, "helper").params == ["x"]

    def test_unbound_arrow_is_anonymous(self, sample_result):
        anonymous = [e for e in sample_result.entities if e.name == "anonymous"]

        assert len(anonymous) == 1
        assert anonymous[0].params == ["n"]

    def test_arrow_in_destructuring_is_anonymous(self, code_parser):
        result = code_parser.parse("a.js", "const { f } = { f: () => 1 };\n")

        assert [e.name for e in result.entities] == ["anonymous"]

    def test_single_bare_parameter(self, code_parser):
        result = code_parser.parse("a.js", "const twice = x => x * 2;\n")
        assert result.entities[0].params == ["x"]

    def test_non_identifier_parameters(self, code_parser):
        result = code_parser.parse(
            "a.js", "function f({ a }, [b], c = 1, ...rest) {}\n"
        )
        assert result.entities[0].params == ["param", "param", "param", "param"]

    def test_default_exported_anonymous_function(self, code_parser):
        result = code_parser.parse("a.js", "export default function () {}\n")

        assert [(e.name, e.is_exported) for e in result.entities] == [("anonymous", True)]
        assert [(e.name, e.is_default) for e in result.exports] == [("default", True)]

    def test_function_expressions_are_not_declarations(self, code_parser):
        result = code_parser.parse("a.js", "const f = function named() {};\n")
        assert result.entities == []


class TestClasses:
    """Test class, method and property extraction."""

    def test_class_members(self, code_parser):
        result = code_parser.parse("a.js", "class Foo { bar(x) {} prop; }")

        assert [(e.kind, e.name) for e in result.entities] == [
            (EntityKind.CLASS, "Foo"),
            (EntityKind.METHOD, "bar"),
            (EntityKind.PROPERTY, "prop"),
        ]
        method, prop = result.entities[1], result.entities[2]
        assert method.parent_class == "Foo"
        assert method.params == ["x"]
        assert method.visibility == Visibility.PUBLIC
        assert prop.parent_class == "Foo"
        assert prop.params is None
        assert prop.is_async is None

    def test_class_entity(self, sample_result):
        entity = _by_name(sample_result, "UserService", EntityKind.CLASS)

        assert entity.is_exported is True
        assert entity.parent_class is None
        assert entity.visibility is None

    def test_member_visibility(self, sample_result):
        visibility = {
            e.name: e.visibility
            for e in sample_result.entities
            if e.parent_class == "UserService"
        }

        assert visibility["cache"] == Visibility.PRIVATE
        assert visibility["baseUrl"] == Visibility.PROTECTED
        assert visibility["#secret"] == Visibility.PRIVATE
        assert visibility["count"] == Visibility.PUBLIC
        assert visibility["fetchUser"] == Visibility.PUBLIC

    def test_methods(self, sample_result):
        fetch = _by_name(sample_result, "fetchUser")
        assert fetch.kind == EntityKind.METHOD
        assert fetch.is_async is True
        assert fetch.params == ["id", "param", "param"]
        assert fetch.return_type == "Promise<User>"

        constructor = _by_name(sample_result, "constructor")
        assert constructor.params == ["param", "retries"]

        getter = _by_name(sample_result, "size")
        assert getter.kind == EntityKind.METHOD
        assert getter.parent_class == "UserService"

    def test_abstract_class_skips_signatures(self, sample_result):
        _by_name(sample_result, "BaseRepo", EntityKind.CLASS)
        members = [e.name for e in sample_result.entities if e.parent_class == "BaseRepo"]

        assert members == ["save"]

    def test_default_exported_anonymous_class(self, code_parser):
        result = code_parser.parse("a.js", "export default class { run() {} }\n")

        assert [(e.name, e.kind) for e in result.entities] == [
            ("AnonymousClass", EntityKind.CLASS),
            ("run", EntityKind.METHOD),
        ]
        assert result.entities[1].parent_class == "AnonymousClass"

    def test_class_expressions_are_not_declarations(self, code_parser):
        result = code_parser.parse("a.js", "const K = class Inner {};\n")
        assert result.entities == []


class TestTypeDeclarations:
    """Test TypeScript interfaces and type aliases."""

    def test_interface(self, sample_result):
        entity = _by_name(sample_result, "User", EntityKind.INTERFACE)
        assert entity.is_exported is True

    def test_type_alias(self, sample_result):
        entity = _by_name(sample_result, "UserId", EntityKind.TYPE)
        assert entity.is_exported is False


class TestImports:
    """Test import declaration extraction."""

    def test_imports(self, sample_result):
        imports = [
            (i.source, i.imported_names, i.is_default, i.is_namespace, i.line)
            for i in sample_result.imports
        ]

        assert imports == [
            ("react", ["React", "useState", "useEffect"], True, False, 1),
            ("path", ["path"], False, True, 2),
            ("./styles.css", [], False, False, 3),
            ("./config", ["Config"], False, False, 4),
        ]

    def test_require_is_not_an_import(self, code_parser):
        result = code_parser.parse("a.js", 'const fs = require("fs");\n')
        assert result.imports == []


class TestExports:
    """Test export extraction."""

    def test_default_export_of_named_function(self, code_parser):
        result = code_parser.parse("a.js", "export default function f(){}")

        assert [(e.name, e.is_default) for e in result.exports] == [("f", True)]

    def test_multiple_declarators(self, code_parser):
        result = code_parser.parse("a.js", "export const a = 1, b = 2;")

        assert [(e.name, e.is_default) for e in result.exports] == [
            ("a", False),
            ("b", False),
        ]

    def test_sample_exports(self, sample_result):
        exports = [(e.name, e.is_default) for e in sample_result.exports]

        assert exports == [
            ("User", False),
            ("formatUser", False),
            ("loadUser", False),
            ("UserService", False),
            ("helper", False),
            ("generateIds", False),
            ("UserService", True),
        ]

    def test_default_export_of_expression(self, code_parser):
        result = code_parser.parse("a.js", "export default 42;\n")
        assert [(e.name, e.is_default) for e in result.exports] == [("default", True)]

    def test_star_reexport_produces_nothing(self, code_parser):
        result = code_parser.parse("a.js", 'export * from "./all";\n')
        assert result.exports == []

    def test_namespace_reexport(self, code_parser):
        result = code_parser.parse("a.js", 'export * as ns from "./all";\n')

        assert not result.has_errors
        assert [(e.name, e.is_default, e.line) for e in result.exports] == [
            ("ns", False, 1)
        ]

    def test_destructured_declaration_exports_each_binding(self, code_parser):
        result = code_parser.parse(
            "a.js",
            "export const { a, b: renamed, c = 1, ...rest } = obj, [d, [e]] = arr;\n",
        )

        assert not result.has_errors
        assert [e.name for e in result.exports] == [
            "a",
            "renamed",
            "c",
            "rest",
            "d",
            "e",
        ]


class TestPositions:
    """Test entity ids, positions and ordering."""

    def test_entity_id_and_position(self, code_parser):
        result = code_parser.parse("src/a.js", "\n  function foo() {\n  }\n")
        entity = result.entities[0]

        assert (entity.start_line, entity.end_line) == (2, 3)
        assert (entity.start_column, entity.end_column) == (2, 3)
        assert entity.id == "src/a.js:2:2"

    def test_columns_count_characters(self, code_parser):
        result = code_parser.parse("a.js", 'const s = "é"; function f() {}\n')
        assert _by_name(result, "f").start_column == 15

    def test_entities_sorted_by_position(self, sample_result):
        positions = [(e.start_line, e.start_column) for e in sample_result.entities]
        assert positions == sorted(positions)

    def test_ids_unique(self, sample_result):
        ids = [e.id for e in sample_result.entities]
        assert len(ids) == len(set(ids))

    def test_reparse_is_identical(self, code_parser):
        source = SAMPLE_TS.read_text()
        first = code_parser.parse("sample.ts", source)
        second = code_parser.parse("sample.ts", source)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_deep_nesting(self, code_parser):
        depth = 1500
        source = "const x = " + "(" * depth + "1" + ")" * depth + ";\n"
        result = code_parser.parse("deep.js", source)

        assert not result.has_errors


class TestErrors:
    """Test syntax errors and script mode."""

    def test_syntax_error(self, code_parser):
        result = code_parser.parse("a.js", "function broken( {\n")

        assert result.has_errors
        assert result.entities == []
        assert result.imports == []
        assert result.exports == []
        assert re.search(r"\(\d+:\d+\)", result.errors[0])

    def test_script_mode_rejects_imports(self, code_parser):
        options = ParserOptions(source_type=SourceType.SCRIPT)
        result = code_parser.parse("a.js", 'import x from "x";\n', options)

        assert result.has_errors
        assert "sourceType" in result.errors[0]

    def test_module_mode_accepts_imports(self, code_parser):
        options = ParserOptions(source_type=SourceType.MODULE)
        result = code_parser.parse("a.js", 'import x from "x";\n', options)

        assert not result.has_errors
        assert result.errors is None

    def test_script_mode_without_modules(self, code_parser):
        options = ParserOptions(source_type=SourceType.SCRIPT)
        result = code_parser.parse("a.js", "function f() {}\n", options)

        assert not result.has_errors
        assert [e.name for e in result.entities] == ["f"]

    def test_language_reported(self, code_parser):
        assert code_parser.parse("a.ts", "").language == "typescript"
        assert code_parser.parse("a.jsx", "").language == "javascript"

    def test_type_annotations_in_javascript_file(self, code_parser):
        result = code_parser.parse("a.js", "function f(a: number) {}")

        assert not result.has_errors
        assert result.language == "javascript"
        assert result.entities[0].params == ["a"]

    def test_jsx_in_typescript_file(self, code_parser):
        result = code_parser.parse("a.ts", "const x = <div/>;")

        assert not result.has_errors
        assert result.language == "typescript"
