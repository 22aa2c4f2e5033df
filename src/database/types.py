from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class ProjectFileRecord:
    """Detached copy of a project file registry row."""

    id: int
    project_id: str
    path: str
    name: str
    kind: str
    size: int
    modified_time: datetime
    extension: str | None = None
    content: str | None = None

    @property
    def file_id(self) -> str:
        """Key used for the file's entity/import/export records."""
        return str(self.id)


def to_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
