"""
Language helper utilities for code analysis.
"""

from ..constants import GRAMMAR_NAMES, LANGUAGE_NAMES, UNKNOWN_LANGUAGE


def _with_dot(ext: str) -> str:
    ext = ext.lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def get_language_name(ext: str) -> str:
    """
    Helper function to get language name from extension.

    Args:
        ext: File extension (with or without leading dot, any case)

    Returns:
        'javascript', 'typescript', 'php' or 'unknown'
    """
    return LANGUAGE_NAMES.get(_with_dot(ext), UNKNOWN_LANGUAGE)


def get_grammar_name(ext: str) -> str | None:
    """Name of the tree-sitter grammar for an extension, if supported."""
    return GRAMMAR_NAMES.get(_with_dot(ext))
