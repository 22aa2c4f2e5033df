"""SQLAlchemy implementation of ``CodeIndexStore`` plus the project file registry."""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select

from code_analysis.types import (
    CodeEntity,
    EntityKind,
    ExportInfo,
    FileMetadata,
    ImportInfo,
    Visibility,
)

from .manager import DatabaseManager, session_scope
from .models import (
    CodeEntityModel,
    CodeExportModel,
    CodeImportModel,
    ProjectFileModel,
)
from .types import ProjectFileRecord, to_naive_utc, to_utc

logger = logging.getLogger(__name__)


def _record(row: ProjectFileModel) -> ProjectFileRecord:
    return ProjectFileRecord(
        id=row.id,
        project_id=row.project_id,
        path=row.path,
        name=row.name,
        kind=row.kind,
        size=row.size,
        modified_time=to_utc(row.modified_time),
        extension=row.extension,
        content=row.content,
    )


def _entity(row: CodeEntityModel) -> CodeEntity:
    return CodeEntity(
        id=row.entity_id,
        name=row.name,
        kind=EntityKind(row.kind),
        start_line=row.start_line,
        end_line=row.end_line,
        start_column=row.start_column,
        end_column=row.end_column,
        params=list(row.params) if row.params is not None else None,
        return_type=row.return_type,
        is_async=row.is_async,
        is_exported=row.is_exported,
        parent_class=row.parent_class,
        visibility=Visibility(row.visibility) if row.visibility else None,
    )


class SqlCodeIndexStore:
    """Stores entities, imports and exports per file id in SQLite.

    Calls run synchronously inside short sessions; list results come back
    in insertion order.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager: DatabaseManager = db_manager

    # Entities

    async def delete_entities_by_file(self, file_id: str) -> None:
        with session_scope(self.db_manager) as session:
            session.execute(
                delete(CodeEntityModel).where(CodeEntityModel.file_id == file_id)
            )

    async def create_entity(self, file_id: str, entity: CodeEntity) -> None:
        with session_scope(self.db_manager) as session:
            session.add(
                CodeEntityModel(
                    file_id=file_id,
                    entity_id=entity.id,
                    name=entity.name,
                    kind=entity.kind.value,
                    start_line=entity.start_line,
                    end_line=entity.end_line,
                    start_column=entity.start_column,
                    end_column=entity.end_column,
                    params=list(entity.params) if entity.params is not None else None,
                    return_type=entity.return_type,
                    is_async=entity.is_async,
                    is_exported=entity.is_exported,
                    parent_class=entity.parent_class,
                    visibility=entity.visibility.value if entity.visibility else None,
                )
            )

    async def list_entities(self, file_id: str) -> list[CodeEntity]:
        with session_scope(self.db_manager) as session:
            rows = session.scalars(
                select(CodeEntityModel)
                .where(CodeEntityModel.file_id == file_id)
                .order_by(CodeEntityModel.id)
            ).all()
            return [_entity(row) for row in rows]

    # Imports

    async def delete_imports_by_file(self, file_id: str) -> None:
        with session_scope(self.db_manager) as session:
            session.execute(
                delete(CodeImportModel).where(CodeImportModel.file_id == file_id)
            )

    async def create_import(self, file_id: str, import_info: ImportInfo) -> None:
        with session_scope(self.db_manager) as session:
            session.add(
                CodeImportModel(
                    file_id=file_id,
                    source=import_info.source,
                    imported_names=list(import_info.imported_names),
                    is_default=import_info.is_default,
                    is_namespace=import_info.is_namespace,
                    line=import_info.line,
                )
            )

    async def list_imports(self, file_id: str) -> list[ImportInfo]:
        with session_scope(self.db_manager) as session:
            rows = session.scalars(
                select(CodeImportModel)
                .where(CodeImportModel.file_id == file_id)
                .order_by(CodeImportModel.id)
            ).all()
            return [
                ImportInfo(
                    source=row.source,
                    imported_names=list(row.imported_names or []),
                    is_default=bool(row.is_default),
                    is_namespace=bool(row.is_namespace),
                    line=row.line,
                )
                for row in rows
            ]

    # Exports

    async def delete_exports_by_file(self, file_id: str) -> None:
        with session_scope(self.db_manager) as session:
            session.execute(
                delete(CodeExportModel).where(CodeExportModel.file_id == file_id)
            )

    async def create_export(self, file_id: str, export: ExportInfo) -> None:
        with session_scope(self.db_manager) as session:
            session.add(
                CodeExportModel(
                    file_id=file_id,
                    name=export.name,
                    is_default=export.is_default,
                    line=export.line,
                )
            )

    async def list_exports(self, file_id: str) -> list[ExportInfo]:
        with session_scope(self.db_manager) as session:
            rows = session.scalars(
                select(CodeExportModel)
                .where(CodeExportModel.file_id == file_id)
                .order_by(CodeExportModel.id)
            ).all()
            return [
                ExportInfo(name=row.name, is_default=bool(row.is_default), line=row.line)
                for row in rows
            ]

    # Project file registry

    async def list_files(self, project_id: str) -> list[ProjectFileRecord]:
        with session_scope(self.db_manager) as session:
            rows = session.scalars(
                select(ProjectFileModel)
                .where(ProjectFileModel.project_id == project_id)
                .order_by(ProjectFileModel.id)
            ).all()
            return [_record(row) for row in rows]

    async def create_file(
        self, project_id: str, metadata: FileMetadata
    ) -> ProjectFileRecord:
        with session_scope(self.db_manager) as session:
            row = ProjectFileModel(
                project_id=project_id,
                path=metadata.path,
                name=metadata.name,
                kind=metadata.kind.value,
                size=metadata.size,
                modified_time=to_naive_utc(metadata.modified_time),
                extension=metadata.extension,
                content=metadata.content,
            )
            session.add(row)
            session.flush()
            return _record(row)

    async def update_file(self, file_id: int, metadata: FileMetadata) -> None:
        """Refresh size, content and modified time of a registry row."""
        with session_scope(self.db_manager) as session:
            row = session.get(ProjectFileModel, file_id)
            if row is None:
                logger.warning(f"Cannot update missing project file {file_id}")
                return
            row.size = metadata.size
            row.content = metadata.content
            row.modified_time = to_naive_utc(metadata.modified_time)
            row.updated_at = datetime.now(timezone.utc)

    async def delete_file(self, file_id: int) -> None:
        with session_scope(self.db_manager) as session:
            row = session.get(ProjectFileModel, file_id)
            if row is not None:
                session.delete(row)
