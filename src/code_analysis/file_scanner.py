"""
Directory scanner for code analysis.

This module walks a project tree depth-first and reports every file and
folder that is not excluded, with size, extension, modification time and
optionally content. A failure on one entry is logged and the entry skipped;
the rest of the scan continues.
"""

import logging
import os
import stat
from datetime import datetime, timezone

from .constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
)
from .types import EntryKind, FileMetadata, ScanOptions
from .utils.fs_utils import is_directory, list_directory, read_text, stat_entry
from .utils.path_utils import relative_segments, resolve_path

logger = logging.getLogger(__name__)


class FileScanner:
    """
    Depth-first directory scanner.

    This class handles:
    - Substring exclusion on every path segment below the scan root
    - Depth limiting (the root's children are depth 0)
    - Optional content loading for files under the size limit
    - Per-entry failure isolation

    Symbolic links are neither reported nor followed.
    """

    def __init__(
        self,
        exclude_patterns: list[str] | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """
        Initialize the scanner with defaults for every scan.

        Args:
            exclude_patterns: Extra patterns appended to DEFAULT_EXCLUDE_PATTERNS
            max_file_size: Files larger than this are listed without content
            max_depth: Deepest directory level to descend into
        """
        self.exclude_patterns = DEFAULT_EXCLUDE_PATTERNS + list(exclude_patterns or [])
        self.max_file_size = max_file_size
        self.max_depth = max_depth

    def _settings(self, options: ScanOptions) -> tuple[list[str], int, int]:
        patterns = self.exclude_patterns + list(options.exclude_patterns)
        max_file_size = (
            options.max_file_size
            if options.max_file_size is not None
            else self.max_file_size
        )
        max_depth = options.max_depth if options.max_depth is not None else self.max_depth
        return patterns, max_file_size, max_depth

    @staticmethod
    def should_exclude(path: str, root_path: str, patterns: list[str]) -> bool:
        """
        Check whether any segment of ``path`` below ``root_path`` contains one
        of the patterns (case-sensitive substring match).
        """
        segments = relative_segments(path, root_path)
        return any(pattern in segment for segment in segments for pattern in patterns)

    @staticmethod
    def detect_file_type(file_name: str) -> str | None:
        """Lowercased extension without the dot, or None."""
        ext = os.path.splitext(file_name)[1].lower()
        return ext[1:] if ext else None

    async def scan(
        self, root_path: str, options: ScanOptions | None = None
    ) -> list[FileMetadata]:
        """
        Scan a directory tree.

        Args:
            root_path: Directory to scan
            options: Per-scan options; unset values fall back to the scanner's

        Returns:
            Flat list of FileMetadata. Order follows directory iteration and
            is not guaranteed across platforms.
        """
        options = options or ScanOptions()
        absolute_root = resolve_path(root_path)

        if not await is_directory(absolute_root):
            logger.warning(f"Scan root is not a directory: {absolute_root}")
            return []

        patterns, max_file_size, max_depth = self._settings(options)
        results: list[FileMetadata] = []
        await self._scan_directory(
            absolute_root,
            absolute_root,
            depth=0,
            patterns=patterns,
            max_depth=max_depth,
            max_file_size=max_file_size,
            include_content=options.include_content,
            results=results,
        )

        logger.debug(f"Scanned {absolute_root}: {len(results)} entries")
        return results

    async def _scan_directory(
        self,
        dir_path: str,
        root_path: str,
        depth: int,
        patterns: list[str],
        max_depth: int,
        max_file_size: int,
        include_content: bool,
        results: list[FileMetadata],
    ) -> None:
        if depth > max_depth:
            return

        try:
            entries = await list_directory(dir_path)
        except OSError as e:
            logger.warning(f"Failed to scan directory {dir_path}: {e}")
            return

        for entry in entries:
            full_path = os.path.join(dir_path, entry.name)

            if self.should_exclude(full_path, root_path, patterns):
                continue

            try:
                entry_stat = await stat_entry(entry)
            except OSError as e:
                logger.warning(f"Failed to process {full_path}: {e}")
                continue

            modified_time = datetime.fromtimestamp(entry_stat.st_mtime, tz=timezone.utc)

            if stat.S_ISDIR(entry_stat.st_mode):
                results.append(
                    FileMetadata(
                        path=full_path,
                        name=entry.name,
                        kind=EntryKind.FOLDER,
                        size=0,
                        modified_time=modified_time,
                    )
                )
                # Subtree is finished before the next sibling starts
                await self._scan_directory(
                    full_path,
                    root_path,
                    depth=depth + 1,
                    patterns=patterns,
                    max_depth=max_depth,
                    max_file_size=max_file_size,
                    include_content=include_content,
                    results=results,
                )
            elif stat.S_ISREG(entry_stat.st_mode):
                content = None
                if include_content and entry_stat.st_size <= max_file_size:
                    content = await self._read_content(full_path)

                results.append(
                    FileMetadata(
                        path=full_path,
                        name=entry.name,
                        kind=EntryKind.FILE,
                        size=entry_stat.st_size,
                        modified_time=modified_time,
                        extension=self.detect_file_type(entry.name),
                        content=content,
                    )
                )

    async def _read_content(self, file_path: str) -> str | None:
        try:
            return await read_text(file_path)
        except OSError as e:
            logger.warning(f"Failed to read file {file_path}: {e}")
            return None
