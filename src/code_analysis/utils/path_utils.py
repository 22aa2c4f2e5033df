"""
Path manipulation utilities for code analysis.

Cross-platform helpers that keep path presentation consistent between the
scanner, the change detector and the parsers.
"""

import os
from pathlib import Path


def normalize_path(path_str: str) -> str:
    """
    Normalize a path by resolving ./../ segments, removing duplicate slashes,
    and standardizing path separators.

    Args:
        path_str: Path to normalize

    Returns:
        Normalized path
    """
    normalized = os.path.normpath(path_str)

    # Remove trailing slash, except for root paths
    if len(normalized) > 1 and normalized.endswith(("/", "\\")):
        normalized = normalized[:-1]

    return normalized


def resolve_path(path_str: str, base_path_str: str | None = None) -> str:
    """
    Resolve a path to an absolute, normalized path.

    Args:
        path_str: Path to resolve
        base_path_str: Base path for relative resolution (defaults to cwd)

    Returns:
        Absolute path
    """
    base_path = Path(base_path_str) if base_path_str is not None else Path.cwd()
    return normalize_path(str((base_path / Path(path_str)).resolve()))


def relative_segments(path_str: str, root_path: str) -> list[str]:
    """
    Split the part of ``path_str`` below ``root_path`` into its segments.

    Returns an empty list for the root itself.
    """
    try:
        relative = os.path.relpath(path_str, root_path)
    except ValueError:
        # Different drives on Windows
        relative = path_str

    if relative == os.curdir:
        return []
    return [part for part in Path(relative).parts if part not in (os.sep, "/")]


def get_file_extension(file_path: str) -> str:
    """
    Get the file extension from a path.

    Args:
        file_path: Path to get extension from

    Returns:
        Lowercased file extension including the dot (e.g., '.php'), or ''
    """
    return Path(file_path).suffix.lower()
