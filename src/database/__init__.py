from .models import (
    CodeEntityModel,
    CodeExportModel,
    CodeImportModel,
    ProjectFileModel,
)

from .manager import (
    DatabaseManager,
    session_scope,
)

from .store import SqlCodeIndexStore
from .types import ProjectFileRecord

__all__ = [
    "CodeEntityModel",
    "CodeExportModel",
    "CodeImportModel",
    "ProjectFileModel",
    "DatabaseManager",
    "session_scope",
    "SqlCodeIndexStore",
    "ProjectFileRecord",
]
