"""
Data models for code analysis.

Scanner and parser results are plain value objects. ``to_dict()`` produces the
camelCase shape returned over HTTP and handed to persistence adapters.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class EntryKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class EntityKind(str, Enum):
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    INTERFACE = "interface"
    TYPE = "type"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


class SourceType(str, Enum):
    MODULE = "module"
    SCRIPT = "script"


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class FileMetadata:
    """One file or folder found by a scan."""

    path: str
    name: str
    kind: EntryKind
    size: int
    modified_time: datetime
    extension: str | None = None
    content: str | None = None

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "path": self.path,
                "name": self.name,
                "type": self.kind.value,
                "size": self.size,
                "extension": self.extension,
                "modifiedTime": self.modified_time.isoformat(),
                "content": self.content,
            }
        )


@dataclass(frozen=True)
class ScanOptions:
    """Options for a single scan.

    ``exclude_patterns`` extends the default exclusions rather than replacing
    them.
    """

    include_content: bool = False
    max_file_size: int | None = None
    exclude_patterns: list[str] = field(default_factory=list)
    max_depth: int | None = None


@dataclass(frozen=True)
class ChangeSet:
    added: list[FileMetadata] = field(default_factory=list)
    modified: list[FileMetadata] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.modified or self.deleted)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": [f.to_dict() for f in self.added],
            "modified": [f.to_dict() for f in self.modified],
            "deleted": list(self.deleted),
        }


@dataclass(frozen=True)
class CodeEntity:
    """A structural declaration extracted from source.

    ``id`` is ``"{path}:{start_line}:{start_column}"``, which keeps it stable
    across reparses of unchanged code.
    """

    id: str
    name: str
    kind: EntityKind
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    params: list[str] | None = None
    return_type: str | None = None
    is_async: bool | None = None
    is_exported: bool | None = None
    parent_class: str | None = None
    visibility: Visibility | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "type": self.kind.value,
                "startLine": self.start_line,
                "endLine": self.end_line,
                "startColumn": self.start_column,
                "endColumn": self.end_column,
                "params": list(self.params) if self.params is not None else None,
                "returnType": self.return_type,
                "isAsync": self.is_async,
                "isExported": self.is_exported,
                "parentClass": self.parent_class,
                "visibility": self.visibility.value if self.visibility else None,
            }
        )


@dataclass(frozen=True)
class ImportInfo:
    source: str
    imported_names: list[str] = field(default_factory=list)
    is_default: bool = False
    is_namespace: bool = False
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "importedNames": list(self.imported_names),
            "isDefault": self.is_default,
            "isNamespace": self.is_namespace,
            "line": self.line,
        }


@dataclass(frozen=True)
class ExportInfo:
    name: str
    is_default: bool = False
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "isDefault": self.is_default, "line": self.line}


@dataclass(frozen=True)
class ParserOptions:
    """Options accepted by ``CodeParser.parse``.

    ``include_comments`` and ``include_private`` are accepted for API
    compatibility and do not change extraction.
    """

    include_comments: bool = False
    include_private: bool = False
    source_type: SourceType = SourceType.MODULE


@dataclass(frozen=True)
class ParsedFile:
    path: str
    language: str
    entities: list[CodeEntity] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)
    has_errors: bool = False
    errors: list[str] | None = None

    @classmethod
    def failed(cls, path: str, language: str, message: str) -> "ParsedFile":
        """Error-flagged result with no extracted records."""
        return cls(path=path, language=language, has_errors=True, errors=[message])

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "path": self.path,
                "language": self.language,
                "entities": [e.to_dict() for e in self.entities],
                "imports": [i.to_dict() for i in self.imports],
                "exports": [e.to_dict() for e in self.exports],
                "hasErrors": self.has_errors,
                "errors": list(self.errors) if self.errors is not None else None,
            }
        )
