"""Project ingestion pipeline.

Implements the scan/index flow behind the HTTP routes:
- Scan the project tree
- Diff it against the stored file registry (added/modified/deleted)
- Update the registry and drop records of deleted files
- Re-parse changed source files and replace their stored records
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Final

from code_analysis.change_detector import ChangeDetector
from code_analysis.file_scanner import FileScanner
from code_analysis.parser import CodeParser
from code_analysis.types import FileMetadata, ParsedFile, ParserOptions, ScanOptions
from code_analysis.utils.fs_utils import read_text
from code_analysis.utils.path_utils import normalize_path
from database.store import SqlCodeIndexStore
from database.types import ProjectFileRecord
from dependency_graph.builder import (
    DependencyGraph,
    DependencyGraphBuilder,
    FileDependencies,
)

logger = logging.getLogger(__name__)

MAX_REPORTED_FILES: Final[int] = 100


@dataclass
class ScanReport:
    total_files: int = 0
    total_folders: int = 0
    total_size: int = 0
    added: int = 0
    modified: int = 0
    deleted: int = 0
    indexed: int = 0
    files: list[FileMetadata] = field(default_factory=list)

    def stats(self) -> dict[str, int]:
        return {
            "totalFiles": self.total_files,
            "totalFolders": self.total_folders,
            "totalSize": self.total_size,
            "added": self.added,
            "modified": self.modified,
            "deleted": self.deleted,
            "indexed": self.indexed,
        }

    def to_dict(self) -> dict[str, Any]:
        return {"stats": self.stats(), "files": [f.to_dict() for f in self.files]}


class ProjectIngestion:
    """Keeps a project's file registry and code index in sync with disk."""

    def __init__(
        self,
        store: SqlCodeIndexStore,
        scanner: FileScanner | None = None,
        parser: CodeParser | None = None,
    ):
        self.store: SqlCodeIndexStore = store
        self.scanner: FileScanner = scanner or FileScanner()
        self.parser: CodeParser = parser or CodeParser()
        self.detector: ChangeDetector = ChangeDetector(self.scanner)
        self.graph_builder: DependencyGraphBuilder = DependencyGraphBuilder(store)

    async def scan_project(
        self,
        project_id: str,
        project_path: str,
        include_content: bool = False,
        max_file_size: int | None = None,
    ) -> ScanReport:
        """Scan a project, sync the registry and re-index changed files.

        Args:
            project_id: Registry key for the project
            project_path: Directory to scan
            include_content: Store file content in the registry
            max_file_size: Content size limit; larger files are stored without content

        Returns:
            ScanReport with totals and the first 100 scanned entries
        """
        options = ScanOptions(
            include_content=include_content,
            max_file_size=max_file_size,
        )
        scanned = await self.scanner.scan(project_path, options)
        by_path = {normalize_path(entry.path): entry for entry in scanned}

        existing = await self.store.list_files(project_id)
        records = {normalize_path(r.path): r for r in existing}
        snapshot = {r.path: r.modified_time for r in existing}

        changes = await self.detector.detect_changes(project_path, snapshot)

        report = ScanReport(
            total_files=sum(1 for e in scanned if e.is_file),
            total_folders=sum(1 for e in scanned if not e.is_file),
            total_size=sum(e.size for e in scanned if e.is_file),
            added=len(changes.added),
            modified=len(changes.modified),
            deleted=len(changes.deleted),
            files=scanned[:MAX_REPORTED_FILES],
        )

        to_index: list[tuple[ProjectFileRecord, FileMetadata]] = []

        for entry in changes.added:
            # Prefer the entry from the first scan, it carries the content
            metadata = by_path.get(normalize_path(entry.path), entry)
            record = await self.store.create_file(project_id, metadata)
            to_index.append((record, metadata))

        for entry in changes.modified:
            metadata = by_path.get(normalize_path(entry.path), entry)
            record = records[normalize_path(entry.path)]
            await self.store.update_file(record.id, metadata)
            to_index.append((record, metadata))

        for path in changes.deleted:
            record = records.get(normalize_path(path))
            if record is None:
                continue
            await self.remove_file(record)

        for record, metadata in to_index:
            if await self._reindex(record, metadata):
                report.indexed += 1

        logger.info(
            f"Scanned project {project_id} at {project_path}: "
            f"{report.total_files} files, {report.added} added, "
            f"{report.modified} modified, {report.deleted} deleted, "
            f"{report.indexed} indexed"
        )
        return report

    async def _reindex(self, record: ProjectFileRecord, metadata: FileMetadata) -> bool:
        if not self.parser.is_supported(metadata.path):
            return False

        source = metadata.content
        if source is None:
            try:
                source = await read_text(metadata.path)
            except OSError as e:
                logger.warning(f"Failed to read {metadata.path} for indexing: {e}")
                return False

        await self.index_file(record.file_id, metadata.path, source)
        return True

    async def remove_file(self, record: ProjectFileRecord) -> None:
        """Delete a registry row together with its code index records."""
        await self.store.delete_entities_by_file(record.file_id)
        await self.store.delete_imports_by_file(record.file_id)
        await self.store.delete_exports_by_file(record.file_id)
        await self.store.delete_file(record.id)
        logger.debug(f"Removed {record.path} from project {record.project_id}")

    async def index_file(
        self,
        file_id: str,
        path: str,
        source: str,
        options: ParserOptions | None = None,
    ) -> ParsedFile:
        """Parse ``source`` and replace the stored records of ``file_id``.

        A file that fails to parse ends up with no records; the errors are in
        the returned ParsedFile.
        """
        parsed = self.parser.parse(path, source, options)

        await self.store.delete_entities_by_file(file_id)
        await self.store.delete_imports_by_file(file_id)
        await self.store.delete_exports_by_file(file_id)

        if parsed.has_errors:
            logger.warning(f"Failed to parse {path}: {'; '.join(parsed.errors or [])}")
            return parsed

        for entity in parsed.entities:
            await self.store.create_entity(file_id, entity)
        for import_info in parsed.imports:
            await self.store.create_import(file_id, import_info)
        for export in parsed.exports:
            await self.store.create_export(file_id, export)

        logger.debug(
            f"Indexed {path}: {len(parsed.entities)} entities, "
            f"{len(parsed.imports)} imports, {len(parsed.exports)} exports"
        )
        return parsed

    def analyze(
        self, path: str, source: str, options: ParserOptions | None = None
    ) -> tuple[ParsedFile, dict[str, int]]:
        """Parse without persisting. Returns the result and its summary counts."""
        parsed = self.parser.parse(path, source, options)
        return parsed, self.parser.summarize(parsed)

    async def project_graph(self, project_id: str) -> DependencyGraph:
        records = await self.store.list_files(project_id)
        file_ids = [r.file_id for r in records if r.kind == "file"]
        return await self.graph_builder.build_graph(project_id, file_ids)

    async def file_dependencies(self, file_id: str) -> FileDependencies:
        return await self.graph_builder.find_dependencies(file_id)
