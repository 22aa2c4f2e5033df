"""
Language parser manager for tree-sitter parsers.

This module handles loading and caching tree-sitter grammars for the
languages the structural parsers understand. Grammars come from
``tree_sitter_language_pack``.
"""

import logging
from typing import cast

from tree_sitter import Language, Parser, Tree
from tree_sitter_language_pack import SupportedLanguage, get_language

from .errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)


class LanguageParserManager:
    """
    Loads tree-sitter parsers on first use and keeps them for the lifetime of
    the manager.

    Each manager owns its own parsers; nothing is shared between instances.
    A manager is not meant to be used from several threads at once.
    """

    def __init__(self):
        self.parsers: dict[str, Parser] = {}

    def _load_language(self, grammar_name: str) -> Language:
        """
        Load a tree-sitter language.

        Args:
            grammar_name: Name of the grammar (e.g. 'javascript', 'tsx', 'php')

        Returns:
            Loaded Language object

        Raises:
            UnsupportedLanguageError: If the grammar cannot be loaded
        """
        try:
            language = get_language(cast(SupportedLanguage, grammar_name))
        except LookupError as e:
            raise UnsupportedLanguageError(
                f"Language {grammar_name} not available"
            ) from e

        if not language:
            raise UnsupportedLanguageError(f"Language {grammar_name} not available")

        return language

    def get_parser(self, grammar_name: str) -> Parser:
        """
        Return the parser for a grammar, loading it on first use.

        Args:
            grammar_name: Name of the grammar

        Returns:
            tree-sitter Parser bound to the grammar
        """
        if grammar_name in self.parsers:
            return self.parsers[grammar_name]

        logger.debug(f"Loading tree-sitter grammar {grammar_name}")

        parser = Parser()
        parser.language = self._load_language(grammar_name)
        self.parsers[grammar_name] = parser

        return parser

    def parse(self, grammar_name: str, data: bytes) -> Tree:
        """Parse UTF-8 encoded source with the named grammar."""
        return self.get_parser(grammar_name).parse(data)
