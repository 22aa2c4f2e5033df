"""SQLAlchemy database models."""

from datetime import timezone, datetime
from typing import override
from sqlalchemy.sql.schema import Index, UniqueConstraint
from sqlalchemy import (
    JSON,
    Integer,
    String,
    Text,
    Boolean,
    CheckConstraint,
    DateTime,
)
from sqlalchemy.orm import (
    Mapped,
    mapped_column,
    DeclarativeBase,
    MappedAsDataclass,
)


class Base(MappedAsDataclass, DeclarativeBase):  # pyright: ignore[reportUnsafeMultipleInheritance]
    pass


class ProjectFileModel(Base):
    """SQLAlchemy model for the project file registry."""

    __tablename__ = "project_files"  # pyright: ignore[reportUnannotatedClassAttribute]

    @override
    def __repr__(self):
        return f"<ProjectFileModel id={self.id!r} path={self.path!r}>"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    path: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(
        String, CheckConstraint("kind IN ('file', 'folder')"), nullable=False
    )
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    # Stored as naive UTC
    modified_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    extension: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    content: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default_factory=lambda: datetime.now(timezone.utc), init=False
    )

    __table_args__ = (  # pyright: ignore[reportAny, reportUnannotatedClassAttribute]
        UniqueConstraint("project_id", "path"),
        Index("idx_project_files_project", "project_id"),
    )


class CodeEntityModel(Base):
    """SQLAlchemy model for extracted code entities."""

    __tablename__ = "code_entities"  # pyright: ignore[reportUnannotatedClassAttribute]

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )
    file_id: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(
        String,
        CheckConstraint(
            "kind IN ('function', 'class', 'method', 'property', 'interface', 'type')"
        ),
        nullable=False,
    )
    start_line: Mapped[int] = mapped_column(Integer, nullable=False)
    end_line: Mapped[int] = mapped_column(Integer, nullable=False)
    start_column: Mapped[int] = mapped_column(Integer, nullable=False)
    end_column: Mapped[int] = mapped_column(Integer, nullable=False)
    params: Mapped[list[str] | None] = mapped_column(JSON, nullable=True, default=None)
    return_type: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    is_async: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=None)
    is_exported: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, default=None
    )
    parent_class: Mapped[str | None] = mapped_column(
        String, nullable=True, default=None
    )
    visibility: Mapped[str | None] = mapped_column(String, nullable=True, default=None)

    __table_args__ = (  # pyright: ignore[reportAny, reportUnannotatedClassAttribute]
        Index("idx_code_entities_file", "file_id"),
        Index("idx_code_entities_name", "name"),
    )


class CodeImportModel(Base):
    """SQLAlchemy model for import declarations."""

    __tablename__ = "code_imports"  # pyright: ignore[reportUnannotatedClassAttribute]

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )
    file_id: Mapped[str] = mapped_column(String, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False)
    imported_names: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default_factory=list
    )
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    is_namespace: Mapped[bool] = mapped_column(Boolean, default=False)
    line: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (  # pyright: ignore[reportAny, reportUnannotatedClassAttribute]
        Index("idx_code_imports_file", "file_id"),
        Index("idx_code_imports_source", "source"),
    )


class CodeExportModel(Base):
    """SQLAlchemy model for export declarations."""

    __tablename__ = "code_exports"  # pyright: ignore[reportUnannotatedClassAttribute]

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )
    file_id: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    line: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (  # pyright: ignore[reportAny, reportUnannotatedClassAttribute]
        Index("idx_code_exports_file", "file_id"),
    )
