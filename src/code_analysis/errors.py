"""Exceptions raised inside the code analysis package."""


class CodeAnalysisError(Exception):
    """Base class for code analysis failures."""


class SourceSyntaxError(CodeAnalysisError):
    """Source text could not be turned into a clean syntax tree.

    Raised by the structural parsers and converted into an error-flagged
    ``ParsedFile`` before it reaches the caller.
    """

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


class UnsupportedLanguageError(CodeAnalysisError):
    """No tree-sitter grammar is available for the requested language."""
