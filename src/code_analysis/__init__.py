"""
Code analysis package for scanning projects and extracting code structure.

This package walks project trees, detects file changes between scans, and
parses JavaScript, TypeScript and PHP sources with tree-sitter into
declarations (functions, classes, methods, properties, interfaces, type
aliases) and import/export records.

Example Usage:
    >>> from code_analysis import CodeParser, FileScanner
    >>>
    >>> files = await FileScanner().scan('src/')
    >>> parser = CodeParser()
    >>> result = parser.parse('src/app.ts', source)
    >>> print(f"Found {len(result.entities)} entities")
"""

from .change_detector import ChangeDetector
from .file_scanner import FileScanner
from .parser import CodeParser
from .js_parser import JavaScriptParser
from .php_parser import PHPParser, PhpNodeKind
from .language_parser import LanguageParserManager

from .errors import CodeAnalysisError, SourceSyntaxError, UnsupportedLanguageError

from .types import (
    ChangeSet,
    CodeEntity,
    EntityKind,
    EntryKind,
    ExportInfo,
    FileMetadata,
    ImportInfo,
    ParsedFile,
    ParserOptions,
    ScanOptions,
    SourceType,
    Visibility,
)

from .constants import (
    EXTENSIONS,
    LANGUAGE_NAMES,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
)

__version__ = "1.0.0"

__all__ = [
    "ChangeDetector",
    "FileScanner",
    "CodeParser",
    "JavaScriptParser",
    "PHPParser",
    "PhpNodeKind",
    "LanguageParserManager",
    "CodeAnalysisError",
    "SourceSyntaxError",
    "UnsupportedLanguageError",
    "ChangeSet",
    "CodeEntity",
    "EntityKind",
    "EntryKind",
    "ExportInfo",
    "FileMetadata",
    "ImportInfo",
    "ParsedFile",
    "ParserOptions",
    "ScanOptions",
    "SourceType",
    "Visibility",
    "EXTENSIONS",
    "LANGUAGE_NAMES",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_FILE_SIZE",
]
