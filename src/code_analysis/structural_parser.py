"""
Shared parse pipeline for the tree-sitter based structural parsers.

``StructuralParser.parse`` builds the syntax tree, rejects trees containing
syntax errors and hands the clean tree to the language specific extraction.
Every failure inside that pipeline ends up as an error-flagged ``ParsedFile``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from tree_sitter import Node, Tree

from .errors import CodeAnalysisError
from .language_parser import LanguageParserManager
from .types import (
    CodeEntity,
    EntityKind,
    ExportInfo,
    ImportInfo,
    ParsedFile,
    ParserOptions,
)
from .utils.language_helpers import get_language_name
from .utils.path_utils import get_file_extension
from .utils.tree_utils import SourceText, raise_on_syntax_error

logger = logging.getLogger(__name__)


@dataclass
class Extraction:
    """Mutable accumulator used while walking one tree."""

    path: str
    source: SourceText
    options: ParserOptions
    entities: list[CodeEntity] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)

    def add_entity(
        self, node: Node, name: str, kind: EntityKind, **details
    ) -> CodeEntity:
        start_line, end_line, start_column, end_column = self.source.span(node)
        entity = CodeEntity(
            id=f"{self.path}:{start_line}:{start_column}",
            name=name,
            kind=kind,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
            **details,
        )
        self.entities.append(entity)
        return entity

    def sorted_entities(self) -> list[CodeEntity]:
        return sorted(self.entities, key=lambda e: (e.start_line, e.start_column))


class StructuralParser(ABC):
    """Base class for one language family."""

    def __init__(self, parser_manager: LanguageParserManager | None = None):
        self.parser_manager = parser_manager or LanguageParserManager()

    @abstractmethod
    def grammar_for(self, path: str) -> str:
        """tree-sitter grammar used for ``path``."""

    def language_for(self, path: str) -> str:
        return get_language_name(get_file_extension(path))

    @abstractmethod
    def extract(self, tree: Tree, extraction: Extraction) -> None:
        """Fill ``extraction`` from a syntax tree known to be error free."""

    def parse(
        self, path: str, source: str, options: ParserOptions | None = None
    ) -> ParsedFile:
        options = options or ParserOptions()
        language = self.language_for(path)

        try:
            text = SourceText(source)
            tree = self.parser_manager.parse(self.grammar_for(path), text.data)
            raise_on_syntax_error(tree, text)

            extraction = Extraction(path=path, source=text, options=options)
            self.extract(tree, extraction)
        except (CodeAnalysisError, UnicodeError, ValueError) as e:
            logger.debug(f"Failed to parse {path}: {e}")
            return ParsedFile.failed(path, language, str(e))

        return ParsedFile(
            path=path,
            language=language,
            entities=extraction.sorted_entities(),
            imports=extraction.imports,
            exports=extraction.exports,
            has_errors=False,
        )
