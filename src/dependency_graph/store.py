"""Persistence collaborator used by ingestion and the dependency graph builder."""

from typing import Protocol, runtime_checkable

from code_analysis.types import CodeEntity, ExportInfo, ImportInfo


@runtime_checkable
class CodeIndexStore(Protocol):
    """Per-file storage of extracted entities, imports and exports.

    Records are keyed by an opaque string file id. ``list_imports`` and
    ``list_exports`` return records in the order they were created.
    """

    async def delete_entities_by_file(self, file_id: str) -> None: ...

    async def create_entity(self, file_id: str, entity: CodeEntity) -> None: ...

    async def delete_imports_by_file(self, file_id: str) -> None: ...

    async def create_import(self, file_id: str, import_info: ImportInfo) -> None: ...

    async def delete_exports_by_file(self, file_id: str) -> None: ...

    async def create_export(self, file_id: str, export: ExportInfo) -> None: ...

    async def list_imports(self, file_id: str) -> list[ImportInfo]: ...

    async def list_exports(self, file_id: str) -> list[ExportInfo]: ...
