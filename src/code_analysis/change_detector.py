import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from .file_scanner import FileScanner
from .types import ChangeSet, FileMetadata
from .utils.path_utils import normalize_path

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    # Naive snapshot times are taken to be UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class ChangeDetector:
    """Compares a fresh scan against a path -> modified-time snapshot."""

    def __init__(self, scanner: FileScanner | None = None):
        self.scanner = scanner or FileScanner()

    async def detect_changes(
        self, root_path: str, existing_snapshot: Mapping[str, datetime]
    ) -> ChangeSet:
        """
        Detect added, modified and deleted files under ``root_path``.

        A file is modified when its modified time is strictly newer than the
        snapshot's. Content is not compared. Deleted paths are reported exactly
        as spelled in the snapshot.
        """
        current = await self.scanner.scan(root_path)

        snapshot = {
            normalize_path(path): _as_utc(mtime)
            for path, mtime in existing_snapshot.items()
        }
        present = {normalize_path(entry.path) for entry in current}

        added: list[FileMetadata] = []
        modified: list[FileMetadata] = []
        for entry in current:
            if not entry.is_file:
                continue
            previous = snapshot.get(normalize_path(entry.path))
            if previous is None:
                added.append(entry)
            elif entry.modified_time > previous:
                modified.append(entry)

        deleted = [
            path for path in existing_snapshot if normalize_path(path) not in present
        ]

        logger.info(
            f"Changes in {root_path}: {len(added)} added, "
            f"{len(modified)} modified, {len(deleted)} deleted"
        )
        return ChangeSet(added=added, modified=modified, deleted=deleted)
