"""
Test the scan/index pipeline against an in-memory database.
"""

import os

import pytest

from api.config import Settings
from code_analysis.types import ParserOptions, SourceType


def _bump_mtime(path, seconds=60):
    later = path.stat().st_mtime + seconds
    os.utime(path, (later, later))


async def _record_for(ingestion, project_id, name):
    records = await ingestion.store.list_files(project_id)
    return next(r for r in records if r.name == name)


class TestScanProject:
    """Test ProjectIngestion.scan_project."""

    @pytest.mark.asyncio
    async def test_first_scan_registers_and_indexes(self, ingestion, project_tree):
        report = await ingestion.scan_project("p1", str(project_tree))

        assert report.added == 4
        assert report.indexed == 3
        assert report.total_size == sum(
            f.size for f in report.files if f.is_file
        )

        records = await ingestion.store.list_files("p1")
        assert sorted(r.name for r in records) == ["README.md", "app.ts", "leaf.php", "util.js"]

        app = await _record_for(ingestion, "p1", "app.ts")
        imports = await ingestion.store.list_imports(app.file_id)
        assert [i.source for i in imports] == ["./lib/util"]

    @pytest.mark.asyncio
    async def test_reports_at_most_100_files(self, ingestion, tmp_path):
        for i in range(120):
            (tmp_path / f"f{i}.txt").write_text("")

        report = await ingestion.scan_project("p1", str(tmp_path))

        assert report.total_files == 120
        assert len(report.files) == 100
        assert report.indexed == 0

    @pytest.mark.asyncio
    async def test_rescan_after_edit_reindexes_only_that_file(
        self, ingestion, project_tree
    ):
        await ingestion.scan_project("p1", str(project_tree))

        util = project_tree / "src" / "lib" / "util.js"
        util.write_text("export function helper() {}\nexport const extra = 1;\n")
        _bump_mtime(util)

        report = await ingestion.scan_project("p1", str(project_tree))

        assert (report.added, report.modified, report.deleted) == (0, 1, 0)
        assert report.indexed == 1

        record = await _record_for(ingestion, "p1", "util.js")
        exports = await ingestion.store.list_exports(record.file_id)
        assert [e.name for e in exports] == ["helper", "extra"]
        assert record.size == util.stat().st_size

    @pytest.mark.asyncio
    async def test_deleting_a_file_removes_its_records(self, ingestion, project_tree):
        await ingestion.scan_project("p1", str(project_tree))
        app = await _record_for(ingestion, "p1", "app.ts")
        assert await ingestion.store.list_exports(app.file_id)

        (project_tree / "src" / "app.ts").unlink()
        report = await ingestion.scan_project("p1", str(project_tree))

        assert report.deleted == 1
        assert await ingestion.store.list_imports(app.file_id) == []
        assert await ingestion.store.list_exports(app.file_id) == []
        assert await ingestion.store.list_entities(app.file_id) == []
        names = [r.name for r in await ingestion.store.list_files("p1")]
        assert "app.ts" not in names

    @pytest.mark.asyncio
    async def test_broken_file_does_not_affect_others(self, ingestion, project_tree):
        (project_tree / "src" / "broken.js").write_text("function ( {\n")

        report = await ingestion.scan_project("p1", str(project_tree))

        assert report.indexed == 4
        broken = await _record_for(ingestion, "p1", "broken.js")
        util = await _record_for(ingestion, "p1", "util.js")
        assert await ingestion.store.list_entities(broken.file_id) == []
        assert [e.name for e in await ingestion.store.list_exports(util.file_id)] == ["helper"]

    @pytest.mark.asyncio
    async def test_content_stored_when_requested(self, ingestion, project_tree):
        await ingestion.scan_project("p1", str(project_tree), include_content=True)

        readme = await _record_for(ingestion, "p1", "README.md")
        assert readme.content == "# project\n"


class TestIndexFile:
    """Test ProjectIngestion.index_file."""

    @pytest.mark.asyncio
    async def test_replaces_records(self, ingestion):
        await ingestion.index_file("f1", "a.js", 'import a from "a";\nexport const x = 1;\n')
        parsed = await ingestion.index_file("f1", "a.js", 'import b from "b";\n')

        assert not parsed.has_errors
        assert [i.source for i in await ingestion.store.list_imports("f1")] == ["b"]
        assert await ingestion.store.list_exports("f1") == []

    @pytest.mark.asyncio
    async def test_parse_error_clears_records(self, ingestion):
        await ingestion.index_file("f1", "a.js", "export function f() {}\n")
        parsed = await ingestion.index_file("f1", "a.js", "export function ( {\n")

        assert parsed.has_errors
        assert await ingestion.store.list_entities("f1") == []
        assert await ingestion.store.list_exports("f1") == []

    @pytest.mark.asyncio
    async def test_options_are_passed_through(self, ingestion):
        options = ParserOptions(source_type=SourceType.SCRIPT)
        parsed = await ingestion.index_file("f1", "a.js", 'import a from "a";\n', options)

        assert parsed.has_errors
        assert await ingestion.store.list_imports("f1") == []

    @pytest.mark.asyncio
    async def test_entities_stored_in_order(self, ingestion):
        parsed = await ingestion.index_file(
            "f1", "a.ts", "class A { b() {} }\nfunction c() {}\n"
        )
        assert await ingestion.store.list_entities("f1") == parsed.entities


class TestAnalyze:
    def test_analyze_does_not_persist(self, ingestion):
        parsed, stats = ingestion.analyze("a.js", "function f() {}\n")

        assert stats["functions"] == 1
        assert parsed.entities[0].name == "f"


class TestSettings:
    """Test environment settings."""

    def test_defaults(self, monkeypatch):
        for name in (
            "CODE_INTEL_DB_PATH",
            "CODE_INTEL_MAX_FILE_SIZE",
            "CODE_INTEL_MAX_DEPTH",
            "CODE_INTEL_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env(load_files=False)

        assert settings.db_path == "code-intel.db"
        assert settings.max_file_size == 10 * 1024 * 1024
        assert settings.max_depth == 10
        assert settings.log_level == "INFO"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CODE_INTEL_DB_PATH", "/tmp/index.db")
        monkeypatch.setenv("CODE_INTEL_MAX_DEPTH", "3")
        monkeypatch.setenv("CODE_INTEL_LOG_LEVEL", "debug")

        settings = Settings.from_env(load_files=False)

        assert settings.db_path == "/tmp/index.db"
        assert settings.max_depth == 3
        assert settings.log_level == "DEBUG"

    def test_dotenv_local_overrides(self, monkeypatch, tmp_path):
        # Registers the variable so values loaded from the files are undone
        monkeypatch.setenv("CODE_INTEL_MAX_DEPTH", "0")
        monkeypatch.delenv("CODE_INTEL_MAX_DEPTH")
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("CODE_INTEL_MAX_DEPTH=4\n")
        (tmp_path / ".env.local").write_text("CODE_INTEL_MAX_DEPTH=6\n")

        settings = Settings.from_env()

        assert settings.max_depth == 6

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("CODE_INTEL_MAX_FILE_SIZE", "lots")

        with pytest.raises(ValueError):
            Settings.from_env(load_files=False)
