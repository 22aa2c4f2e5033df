"""Shared pytest fixtures for testing."""

from pathlib import Path

import pytest

from code_analysis.parser import CodeParser
from code_analysis.types import ExportInfo, ImportInfo
from database.manager import DatabaseManager
from database.store import SqlCodeIndexStore

TEST_FILES = Path(__file__).parent / "test_code_analysis" / "test_files"


@pytest.fixture
def db_manager():
    """Create an in-memory database manager for testing."""
    manager = DatabaseManager(db_path=":memory:", echo=False, expire_on_commit=False)
    yield manager
    manager.close()


@pytest.fixture
def sql_store(db_manager):
    return SqlCodeIndexStore(db_manager)


@pytest.fixture
def code_parser():
    return CodeParser()


@pytest.fixture
def project_tree(tmp_path):
    """
    Small project on disk:

        src/app.ts
        src/lib/util.js
        src/lib/deep/leaf.php
        node_modules/pkg/index.js
        README.md
    """
    root = tmp_path / "project"
    (root / "src" / "lib" / "deep").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)

    (root / "src" / "app.ts").write_text(
        'import { helper } from "./lib/util";\nexport const app = helper();\n'
    )
    (root / "src" / "lib" / "util.js").write_text(
        "export function helper() {\n  return 1;\n}\n"
    )
    (root / "src" / "lib" / "deep" / "leaf.php").write_text(
        "<?php\nuse App\\Models\\User;\nfunction leaf($x) {}\n"
    )
    (root / "node_modules" / "pkg" / "index.js").write_text("module.exports = {};\n")
    (root / "README.md").write_text("# project\n")
    return root


class InMemoryStore:
    """Dict-backed CodeIndexStore used where SQLite would only add noise."""

    def __init__(self):
        self.entities: dict[str, list] = {}
        self.imports: dict[str, list[ImportInfo]] = {}
        self.exports: dict[str, list[ExportInfo]] = {}
        self.failing: set[str] = set()

    def _check(self, file_id: str) -> None:
        if file_id in self.failing:
            raise RuntimeError(f"store unavailable for {file_id}")

    async def delete_entities_by_file(self, file_id):
        self.entities.pop(file_id, None)

    async def create_entity(self, file_id, entity):
        self.entities.setdefault(file_id, []).append(entity)

    async def delete_imports_by_file(self, file_id):
        self.imports.pop(file_id, None)

    async def create_import(self, file_id, import_info):
        self.imports.setdefault(file_id, []).append(import_info)

    async def delete_exports_by_file(self, file_id):
        self.exports.pop(file_id, None)

    async def create_export(self, file_id, export):
        self.exports.setdefault(file_id, []).append(export)

    async def list_imports(self, file_id):
        self._check(file_id)
        return list(self.imports.get(file_id, []))

    async def list_exports(self, file_id):
        self._check(file_id)
        return list(self.exports.get(file_id, []))


@pytest.fixture
def memory_store():
    return InMemoryStore()
