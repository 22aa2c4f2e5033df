"""
Entry point for structural parsing.

``CodeParser`` routes a file to the parser for its language family by
extension and never raises: unsupported extensions and broken sources come
back as error-flagged ``ParsedFile`` results, so callers can parse batches
without per-file exception handling.
"""

import logging

from .constants import ECMASCRIPT_EXTENSIONS, PHP_EXTENSIONS, UNKNOWN_LANGUAGE
from .js_parser import JavaScriptParser
from .language_parser import LanguageParserManager
from .php_parser import PHPParser
from .structural_parser import StructuralParser
from .types import EntityKind, ParsedFile, ParserOptions
from .utils.language_helpers import get_language_name
from .utils.path_utils import get_file_extension

logger = logging.getLogger(__name__)


class CodeParser:
    """
    Dispatches source files to the ECMAScript/TypeScript or PHP parser.

    Instances are independent: each owns its grammar cache. Create one per
    worker rather than sharing a global instance.
    """

    def __init__(self, parser_manager: LanguageParserManager | None = None):
        self.parser_manager = parser_manager or LanguageParserManager()
        self.js_parser = JavaScriptParser(self.parser_manager)
        self.php_parser = PHPParser(self.parser_manager)

    def _parser_for(self, extension: str) -> StructuralParser | None:
        if extension in ECMASCRIPT_EXTENSIONS:
            return self.js_parser
        if extension in PHP_EXTENSIONS:
            return self.php_parser
        return None

    def is_supported(self, file_path: str) -> bool:
        return self._parser_for(get_file_extension(file_path)) is not None

    def detect_language(self, file_path: str) -> str:
        """
        Detect the source language of a file from its extension.

        Returns:
            'javascript', 'typescript', 'php' or 'unknown'
        """
        return get_language_name(get_file_extension(file_path))

    def parse(
        self, file_path: str, code: str, options: ParserOptions | None = None
    ) -> ParsedFile:
        """
        Parse source text into entities, imports and exports.

        Args:
            file_path: Path of the file, used for dispatch and entity ids
            code: Source text
            options: Parser options (``source_type`` only affects ECMAScript)

        Returns:
            ParsedFile; ``has_errors`` is set for unsupported extensions and
            syntax errors
        """
        extension = get_file_extension(file_path)
        parser = self._parser_for(extension)

        if parser is None:
            label = extension.lstrip(".") or "<none>"
            logger.debug(f"No parser for {file_path} (extension {label})")
            return ParsedFile.failed(
                file_path, UNKNOWN_LANGUAGE, f"Unsupported file extension: {label}"
            )

        return parser.parse(file_path, code, options)

    @staticmethod
    def summarize(parsed: ParsedFile) -> dict[str, int]:
        """Entity and dependency counts for a parse result."""

        def count(kind: EntityKind) -> int:
            return sum(1 for e in parsed.entities if e.kind == kind)

        return {
            "totalEntities": len(parsed.entities),
            "functions": count(EntityKind.FUNCTION),
            "classes": count(EntityKind.CLASS),
            "methods": count(EntityKind.METHOD),
            "properties": count(EntityKind.PROPERTY),
            "imports": len(parsed.imports),
            "exports": len(parsed.exports),
        }
