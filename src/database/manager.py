"""SQLite engine and session handling for the code index."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA temp_store=MEMORY",
)


def _apply_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    for pragma in _PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def _create_engine(db_path: str, echo: bool) -> Engine:
    connect_args = {"check_same_thread": False}
    if db_path == MEMORY_DB:
        # Every session must see the same in-memory database
        return create_engine(
            "sqlite://",
            echo=echo,
            connect_args=connect_args,
            poolclass=StaticPool,
        )

    Path(db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{Path(db_path).expanduser()}",
        echo=echo,
        connect_args=connect_args,
    )


@contextmanager
def session_scope(db_manager: "DatabaseManager") -> Generator[Session, None, None]:
    """Transactional session: committed on success, rolled back on error.

    Example:
        with session_scope(db_manager) as session:
            session.add(CodeExportModel(file_id="1", name="main"))
    """
    with db_manager.get_session() as session:
        yield session


class DatabaseManager:
    """Owns the engine and session factory of one code index database.

    The schema is created on construction, so a fresh path or ``:memory:``
    is usable right away.
    """

    def __init__(
        self,
        db_path: str = MEMORY_DB,
        echo: bool = False,
        expire_on_commit: bool = True,
    ):
        self.db_path = db_path
        self.echo = echo
        self.engine = _create_engine(db_path, echo)
        event.listen(self.engine, "connect", _apply_pragmas)
        self.SessionLocal = sessionmaker(
            autoflush=False,
            bind=self.engine,
            expire_on_commit=expire_on_commit,
        )
        logger.info(f"Opened code index database at {db_path}")
        self.create_tables()

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY_DB

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def reset_database(self) -> None:
        """Drop and recreate the index tables, discarding every record."""
        self.drop_tables()
        self.create_tables()
        logger.info(f"Reset code index database at {self.db_path}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_all_tables(self) -> list[str]:
        """Names of the tables currently present in the database."""
        return inspect(self.engine).get_table_names()

    def close(self) -> None:
        self.engine.dispose()
